import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./accounts.db")
    DB_CREATE_TABLES = bool(data.get("DB_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8001)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    PUBLIC_BASE_URL = data.get("PUBLIC_BASE_URL", "http://localhost:8001")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Credentials and tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    SESSION_TOKEN_DAYS = data.get("SESSION_TOKEN_DAYS", 7)
    VERIFICATION_TOKEN_MINUTES = data.get("VERIFICATION_TOKEN_MINUTES", 60)
    RESET_CODE_MINUTES = data.get("RESET_CODE_MINUTES", 60)
    RESET_CODE_LENGTH = data.get("RESET_CODE_LENGTH", 6)
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 10)

    # Mail dispatch
    MAIL_API_URL = data.get("MAIL_API_URL", "https://api.resend.com/emails")
    MAIL_API_KEY = data.get("MAIL_API_KEY", "")
    MAIL_FROM = data.get("MAIL_FROM", "Accounts <no-reply@example.com>")
    MAIL_TIMEOUT_SECONDS = data.get("MAIL_TIMEOUT_SECONDS", 10.0)

    # Avatar object storage (S3-compatible)
    S3_BUCKET = data.get("S3_BUCKET", "")
    S3_REGION = data.get("S3_REGION", "us-east-1")
    S3_ENDPOINT = data.get("S3_ENDPOINT", "")
    S3_ACCESS_KEY = data.get("S3_ACCESS_KEY", "")
    S3_SECRET_KEY = data.get("S3_SECRET_KEY", "")
    S3_PUBLIC_URL = data.get("S3_PUBLIC_URL", "")
    STORAGE_TIMEOUT_SECONDS = data.get("STORAGE_TIMEOUT_SECONDS", 30.0)
    AVATAR_FOLDER = data.get("AVATAR_FOLDER", "uploaded/profile_photos")
    AVATAR_MAX_BYTES = data.get("AVATAR_MAX_BYTES", 1024 * 1024)
