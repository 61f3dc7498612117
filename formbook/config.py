# formbook/config.py
import os

from dotenv import load_dotenv

# Load the .env from the project root, falling back to the working directory
PROJECT_ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
dotenv_path = os.path.join(PROJECT_ROOT_DIR, ".env")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)
else:
    load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL")
USING_SQLITE_FALLBACK = DATABASE_URL is None
if USING_SQLITE_FALLBACK:
    sqlite_db_path = os.path.join(os.path.dirname(__file__), "formbook_fallback.db")
    DATABASE_URL = f"sqlite+aiosqlite:///{sqlite_db_path}"

DB_ECHO = _env_flag("DB_ECHO", "false")
# Tables are normally managed by Alembic; the local SQLite fallback creates them on startup
AUTO_CREATE_TABLES = _env_flag(
    "AUTO_CREATE_TABLES", "true" if USING_SQLITE_FALLBACK else "false"
)

# --- HTTP ---
FALLBACK_ORIGINS = [
    "http://127.0.0.1:5173",
    "http://localhost:5173",
]
env_origins = os.getenv("BACKEND_ALLOWED_ORIGINS")
ALLOWED_ORIGINS = (
    [origin.strip() for origin in env_origins.split(",") if origin.strip()]
    if env_origins
    else []
) or FALLBACK_ORIGINS

# --- Uploads ---
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(PROJECT_ROOT_DIR, "public", "uploads"))
UPLOADS_ROUTE = "/uploads"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))
# content type -> extension of the stored file
IMAGE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/svg+xml": ".svg",
}
ALLOWED_IMAGE_TYPES = list(IMAGE_EXTENSIONS)

# --- Logging / server ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
RELOAD_APP = _env_flag("RELOAD_APP", "false")
