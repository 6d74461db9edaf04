"""Test environment: in-memory SQLite and a fixed signing secret, set before the app is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-" + "x" * 64)
os.environ.setdefault("APP_ENV", "dev")
