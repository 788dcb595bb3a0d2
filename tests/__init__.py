import os

# API tests swap in their own database; keep the default engine local
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
