from dotenv import load_dotenv

import os

load_dotenv()

DEV = os.environ.get("DEV", "true").lower() == "true"

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me" if DEV else None)
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# memory:// keeps a single-process dev server free of Redis
BROADCAST_URL = os.getenv("BROADCAST_URL", "memory://" if DEV else "redis://localhost:6379")

SQLITE_URL = os.environ.get("SQLITE_URL", "sqlite:///./arena.db")
POSTGRES_URL = os.environ.get("POSTGRES_URL")

CARD_CATALOG_PATH = os.getenv("CARD_CATALOG_PATH")
DEFAULT_SLOT_COUNT = int(os.getenv("DEFAULT_SLOT_COUNT", "3"))
DEFAULT_REVEAL_DELAY_SECONDS = float(os.getenv("DEFAULT_REVEAL_DELAY_SECONDS", "5"))

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
