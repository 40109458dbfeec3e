"""Global pytest configuration."""

import os

# Tests run against in-memory SQLite unless DATABASE_URL points elsewhere
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
