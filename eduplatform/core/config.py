import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eduplatform.db")
DATABASE_ECHO = _get_bool(os.getenv("DATABASE_ECHO"), default=False)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

API_KEY_HEADER = os.getenv("API_KEY_HEADER", "x-api-key")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:4200"])

# Bootstrap administrator and API keys, created once at startup when set.
ADMIN_LOGIN = os.getenv("ADMIN_LOGIN")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
API_KEYS = _get_list(os.getenv("API_KEYS"), [])

API_PREFIX = "/api/v1"

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if JWT_EXPIRES_MINUTES <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be a positive number of minutes.")
    if ADMIN_LOGIN and not (ADMIN_EMAIL and ADMIN_PASSWORD):
        raise RuntimeError("ADMIN_EMAIL and ADMIN_PASSWORD must be set together with ADMIN_LOGIN.")
