# Runtime settings. Prefer environment variables in production; the defaults
# are only meant for local development.

import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./peerlearn.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# -------------------- AUTH --------------------

SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_THIS_SECRET_LATER")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "60"))

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@peerlearn.dev")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin@peerlearn007")
ADMIN_NAME = os.getenv("ADMIN_NAME", "PeerLearn Admin")

# -------------------- HTTP --------------------

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
PORT = int(os.getenv("PORT", "5000"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")
MAX_PICTURE_BYTES = int(os.getenv("MAX_PICTURE_BYTES", str(5 * 1024 * 1024)))

# -------------------- LOGGING --------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"

SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

# -------------------- MAIL --------------------

MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
MAIL_FROM = os.getenv("MAIL_FROM", "")
MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
MAIL_STARTTLS = os.getenv("MAIL_STARTTLS", "true").lower() == "true"
MAIL_SSL_TLS = os.getenv("MAIL_SSL_TLS", "false").lower() == "true"


def cors_origin_list():
    if CORS_ORIGINS.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
