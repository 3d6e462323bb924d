# indent_tracker/config.py

import os

from dotenv import load_dotenv

load_dotenv()

# ────────────────────────────── DATABASE ──────────────────────────────
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./indents.db")

# ────────────────────────────── AUTH ──────────────────────────────
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "43200"))
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "300"))

# ────────────────────────────── FILE STORAGE ──────────────────────────────
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "maintenance")
FILES_ROUTE = os.getenv("FILES_ROUTE", "/files")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", FILES_ROUTE)
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# ────────────────────────────── SMS (Africa's Talking) ──────────────────────────────
AT_USERNAME = os.getenv("AT_USERNAME") or os.getenv("AFRICASTALKING_USERNAME")
AT_API_KEY = os.getenv("AT_API_KEY") or os.getenv("AFRICASTALKING_APIKEY")
AT_FROM = os.getenv("AT_FROM") or os.getenv("AFRICASTALKING_FROM")

# ────────────────────────────── MISC ──────────────────────────────
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:8080,http://localhost:5173",
    ).split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def require_secret_key() -> str:
    """Tokens are never signed or verified without an explicit SECRET_KEY."""
    if not SECRET_KEY:
        raise RuntimeError("SECRET_KEY is not set")
    return SECRET_KEY
