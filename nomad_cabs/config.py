import os

DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite+aiosqlite:///./nomad_cabs.db"
DB_ECHO = (os.getenv("DB_ECHO") or "false").lower() == "true"

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES") or "1440")

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS") or "12")

PLATFORM_FEE_RATE = float(os.getenv("PLATFORM_FEE_RATE") or "0.10")
COMMISSION_RATE = float(os.getenv("COMMISSION_RATE") or "0.10")

# optional in dev; events and rate limiting are disabled when unset
RABBIT_URL = os.getenv("RABBIT_URL")
REDIS_URL = os.getenv("REDIS_URL")
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE") or "120")

SEED_DEMO_USERS = (os.getenv("SEED_DEMO_USERS") or "false").lower() == "true"

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
