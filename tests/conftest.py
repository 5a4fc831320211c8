"""Root conftest: keep tests on the in-memory store and off any real .env."""

import os

os.environ.setdefault("ECO9_ACTIVITY_STORE", "memory")
os.environ.setdefault("ECO9_DATABASE_URL", "sqlite://")
os.environ.setdefault("ECO9_LOG_FORMAT", "text")
