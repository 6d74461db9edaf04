"""Tests for coopqueue.services.accounts: admin-only actions and root/self guards."""

import unittest

from coopqueue.core.database import build_engine, build_session_factory
from coopqueue.core.errors import ErrorKind
from coopqueue.models import Account, Base
from coopqueue.models.user import ROOT_ACCOUNT_ID
from coopqueue.schemas.auth import CurrentUser, Role
from coopqueue.schemas.items import ItemDraft
from coopqueue.services import accounts, catalog, credentials


class AccountsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        self.db = build_session_factory(self.engine)()
        for name in ("owner", "boss", "bob"):
            credentials.register(self.db, name, f"{name}-pass")
        # Promote boss to a second administrator.
        self.db.get(Account, 2).role = Role.ADMINISTRATOR.value
        self.db.commit()
        self.root = CurrentUser(id=ROOT_ACCOUNT_ID, username="owner", role=Role.ADMINISTRATOR)
        self.boss = CurrentUser(id=2, username="boss", role=Role.ADMINISTRATOR)
        self.bob = CurrentUser(id=3, username="bob", role=Role.STANDARD)

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestListAccounts(AccountsTestCase):
    def test_lists_without_password_material(self) -> None:
        listed = accounts.list_accounts(self.db)
        self.assertEqual([(a.id, a.username, a.role) for a in listed], [
            (1, "owner", Role.ADMINISTRATOR),
            (2, "boss", Role.ADMINISTRATOR),
            (3, "bob", Role.STANDARD),
        ])
        self.assertNotIn("password_hash", listed[0].model_dump())


class TestRootAccountProtection(AccountsTestCase):
    def test_root_cannot_be_deleted_toggled_or_reset_by_anyone(self) -> None:
        for actor in (self.root, self.boss):
            with self.subTest(actor=actor.username):
                self.assertEqual(accounts.delete_account(self.db, ROOT_ACCOUNT_ID, actor).error, ErrorKind.CONFLICT)
                self.assertEqual(accounts.toggle_role(self.db, ROOT_ACCOUNT_ID, actor).error, ErrorKind.CONFLICT)
                self.assertEqual(
                    accounts.reset_password(self.db, ROOT_ACCOUNT_ID, "hijack1", actor).error,
                    ErrorKind.CONFLICT,
                )
        self.db.expire_all()
        root = self.db.get(Account, ROOT_ACCOUNT_ID)
        self.assertEqual(root.role, "administrator")
        self.assertTrue(credentials.login(self.db, "owner", "owner-pass").success)


class TestDeleteAccount(AccountsTestCase):
    def test_admin_deletes_other(self) -> None:
        result = accounts.delete_account(self.db, 3, self.boss)
        self.assertTrue(result.success)
        self.assertIsNone(self.db.get(Account, 3))

    def test_self_delete_refused(self) -> None:
        result = accounts.delete_account(self.db, 2, self.boss)
        self.assertEqual(result.error, ErrorKind.CONFLICT)
        self.assertIsNotNone(self.db.get(Account, 2))

    def test_standard_user_forbidden(self) -> None:
        self.assertEqual(accounts.delete_account(self.db, 2, self.bob).error, ErrorKind.AUTHORIZATION)

    def test_missing(self) -> None:
        self.assertEqual(accounts.delete_account(self.db, 99, self.boss).error, ErrorKind.NOT_FOUND)

    def test_new_account_never_inherits_deleted_id_or_votes(self) -> None:
        item_id = catalog.add_item(self.db, ItemDraft(title="Hades"), self.root).data[0].id
        self.assertTrue(catalog.upvote_item(self.db, item_id, 3).success)
        self.assertTrue(accounts.delete_account(self.db, 3, self.boss).success)

        carol_id = credentials.register(self.db, "carol", "carol-pass").data
        self.assertNotEqual(carol_id, 3)
        [view] = catalog.list_items(self.db, carol_id)
        self.assertEqual((view.vote_count, view.voted_by_requester), (1, False))
        result = catalog.upvote_item(self.db, item_id, carol_id)
        self.assertTrue(result.success)
        self.assertEqual(result.data[0].vote_count, 2)


class TestToggleRole(AccountsTestCase):
    def test_toggles_both_ways(self) -> None:
        self.assertEqual(accounts.toggle_role(self.db, 3, self.boss).data, Role.ADMINISTRATOR)
        self.assertEqual(accounts.toggle_role(self.db, 3, self.boss).data, Role.STANDARD)
        self.db.expire_all()
        self.assertEqual(self.db.get(Account, 3).role, "standard")

    def test_self_demotion_refused(self) -> None:
        result = accounts.toggle_role(self.db, 2, self.boss)
        self.assertEqual(result.error, ErrorKind.CONFLICT)
        self.assertIn("own admin rights", result.message)

    def test_standard_user_forbidden(self) -> None:
        self.assertEqual(accounts.toggle_role(self.db, 2, self.bob).error, ErrorKind.AUTHORIZATION)


class TestResetPassword(AccountsTestCase):
    def test_admin_resets_other(self) -> None:
        self.assertTrue(accounts.reset_password(self.db, 3, "fresh-pass", self.boss).success)
        self.assertFalse(credentials.login(self.db, "bob", "bob-pass").success)
        self.assertTrue(credentials.login(self.db, "bob", "fresh-pass").success)

    def test_missing(self) -> None:
        self.assertEqual(accounts.reset_password(self.db, 99, "fresh-pass", self.boss).error, ErrorKind.NOT_FOUND)

    def test_standard_user_forbidden(self) -> None:
        self.assertEqual(accounts.reset_password(self.db, 2, "fresh-pass", self.bob).error, ErrorKind.AUTHORIZATION)


if __name__ == "__main__":
    unittest.main()
