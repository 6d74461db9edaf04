"""Tests for coopqueue.services.credentials against in-memory SQLite."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from coopqueue.core.config import settings
from coopqueue.core.database import build_engine, build_session_factory
from coopqueue.core.errors import ErrorKind
from coopqueue.models import Account, Base
from coopqueue.schemas.auth import Role
from coopqueue.services import credentials


def _session():
    """Fresh in-memory database and session."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    return engine, build_session_factory(engine)()


class CredentialTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, self.db = _session()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestRegister(CredentialTestCase):
    def test_first_account_is_admin_then_standard(self) -> None:
        alice = credentials.register(self.db, "alice", "secret1")
        bob = credentials.register(self.db, "bob", "secret2")
        carol = credentials.register(self.db, "carol", "secret3")
        self.assertTrue(alice.success and bob.success and carol.success)
        self.assertEqual(alice.data, 1)
        roles = {a.username: a.role for a in self.db.query(Account).all()}
        self.assertEqual(roles, {"alice": "administrator", "bob": "standard", "carol": "standard"})

    def test_duplicate_username_case_insensitive(self) -> None:
        credentials.register(self.db, "Alice", "secret1")
        result = credentials.register(self.db, "aLICE", "secret2")
        self.assertFalse(result.success)
        self.assertEqual(result.error, ErrorKind.CONFLICT)
        self.assertEqual(self.db.query(Account).count(), 1)

    def test_username_is_trimmed(self) -> None:
        credentials.register(self.db, "  alice ", "secret1")
        self.assertEqual(self.db.query(Account).one().username, "alice")

    def test_blank_username_rejected(self) -> None:
        result = credentials.register(self.db, "   ", "secret1")
        self.assertEqual(result.error, ErrorKind.VALIDATION)

    def test_identical_passwords_get_unique_material(self) -> None:
        credentials.register(self.db, "alice", "same-pass")
        credentials.register(self.db, "bob", "same-pass")
        a, b = self.db.query(Account).order_by(Account.id).all()
        self.assertNotEqual(a.password_salt, b.password_salt)
        self.assertNotEqual(a.password_hash, b.password_hash)


class TestLogin(CredentialTestCase):
    def setUp(self) -> None:
        super().setUp()
        credentials.register(self.db, "alice", "secret1")
        credentials.register(self.db, "bob", "secret2")

    def test_unknown_user(self) -> None:
        result = credentials.login(self.db, "mallory", "secret1")
        self.assertEqual(result.error, ErrorKind.AUTHENTICATION)
        self.assertIn("not found", result.message.lower())

    def test_wrong_password(self) -> None:
        result = credentials.login(self.db, "alice", "secret2")
        self.assertEqual(result.error, ErrorKind.AUTHENTICATION)
        self.assertIn("wrong password", result.message.lower())

    def test_success_issues_token_with_claims(self) -> None:
        result = credentials.login(self.db, "ALICE", "secret1")
        self.assertTrue(result.success)
        self.assertEqual(result.data.role, Role.ADMINISTRATOR)
        claims = credentials.parse_session(result.data.token)
        self.assertIsNotNone(claims)
        self.assertEqual(claims.subject_id, 1)
        self.assertEqual(claims.subject_name, "alice")
        self.assertEqual(claims.role, Role.ADMINISTRATOR)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(hours=24))

    def test_standard_role_in_token(self) -> None:
        result = credentials.login(self.db, "bob", "secret2")
        self.assertEqual(credentials.parse_session(result.data.token).role, Role.STANDARD)


class TestChangePassword(CredentialTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.account_id = credentials.register(self.db, "alice", "secret1").data

    def test_changes_password(self) -> None:
        self.assertTrue(credentials.change_password(self.db, self.account_id, "secret1", "newpass"))
        self.assertFalse(credentials.login(self.db, "alice", "secret1").success)
        self.assertTrue(credentials.login(self.db, "alice", "newpass").success)

    def test_regenerates_salt(self) -> None:
        old_salt = self.db.get(Account, self.account_id).password_salt
        credentials.change_password(self.db, self.account_id, "secret1", "newpass")
        self.db.expire_all()
        self.assertNotEqual(self.db.get(Account, self.account_id).password_salt, old_salt)

    def test_wrong_old_password_fails_closed(self) -> None:
        self.assertFalse(credentials.change_password(self.db, self.account_id, "nope", "newpass"))
        self.assertTrue(credentials.login(self.db, "alice", "secret1").success)

    def test_missing_account_fails_closed(self) -> None:
        self.assertFalse(credentials.change_password(self.db, 999, "secret1", "newpass"))


class TestParseSession(unittest.TestCase):
    """Anything but a valid, unexpired, correctly signed token yields None."""

    def _token(self, **overrides: object) -> str:
        now = datetime.now(UTC)
        payload = {"sub": "5", "name": "bob", "role": "standard", "iat": now, "exp": now + timedelta(hours=1)}
        payload.update(overrides)
        return jwt.encode(payload, settings.JWT_SECRET.get_secret_value(), algorithm="HS512")

    def test_valid(self) -> None:
        claims = credentials.parse_session(self._token())
        self.assertEqual(claims.subject_id, 5)
        self.assertEqual(claims.role, Role.STANDARD)

    def test_missing_or_garbage(self) -> None:
        self.assertIsNone(credentials.parse_session(None))
        self.assertIsNone(credentials.parse_session(""))
        self.assertIsNone(credentials.parse_session("not.a.jwt"))

    def test_expired(self) -> None:
        past = datetime.now(UTC) - timedelta(days=2)
        self.assertIsNone(credentials.parse_session(self._token(iat=past, exp=past + timedelta(hours=24))))

    def test_tampered_signature(self) -> None:
        token = self._token()
        head, body, sig = token.split(".")
        forged = f"{head}.{body}.{sig[:-4]}AAAA"
        self.assertIsNone(credentials.parse_session(forged))

    def test_unknown_role(self) -> None:
        self.assertIsNone(credentials.parse_session(self._token(role="superuser")))

    def test_non_numeric_subject(self) -> None:
        self.assertIsNone(credentials.parse_session(self._token(sub="alice")))

    def test_missing_name(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "5", "role": "standard", "iat": now, "exp": now + timedelta(hours=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm="HS512",
        )
        self.assertIsNone(credentials.parse_session(token))


if __name__ == "__main__":
    unittest.main()
