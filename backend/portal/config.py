# portal/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Captive Portal API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))

    # CORS origins for the portal frontend
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]

    # PostgreSQL settings (DATABASE_URL wins when set)
    database_url: str | None = os.getenv("DATABASE_URL")
    db_host: str = os.getenv("DB_HOST", "localhost")
    db_port: int = int(os.getenv("DB_PORT", "5432"))
    db_name: str = os.getenv("DB_NAME", "radius")
    db_user: str = os.getenv("DB_USER", "postgres")
    db_password: str = os.getenv("DB_PASSWORD", "")
    db_pool_max: int = int(os.getenv("DB_POOL_MAX", "20"))
    db_generate_schemas: bool = _env_flag("DB_GENERATE_SCHEMAS")

    # Token settings
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")  # use a strong secret in production
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

    # Password hashing cost (bcrypt log rounds)
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # RADIUS server settings
    radius_host: str = os.getenv("RADIUS_HOST", "localhost")
    radius_port: int = int(os.getenv("RADIUS_PORT", "1812"))
    radius_secret: str = os.getenv("RADIUS_SECRET", "testing123")
    radius_timeout: float = float(os.getenv("RADIUS_TIMEOUT", "5"))
    radius_nas_identifier: str | None = os.getenv("RADIUS_NAS_IDENTIFIER")
    radius_check_on_startup: bool = _env_flag("RADIUS_CHECK_ON_STARTUP")

    # Default admin created on first startup
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")

settings = Settings()  # Instantiate configuration
