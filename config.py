import os
import sys
from dotenv import load_dotenv

load_dotenv()

# Detect environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# API Configuration
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_WORKERS = int(os.getenv("API_WORKERS", "4"))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///task_manager.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"

# CORS Configuration with validation
ALLOWED_ORIGINS_STR = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:8000,http://127.0.0.1:8000"
)
ALLOWED_ORIGINS = [origin.strip() for origin in ALLOWED_ORIGINS_STR.split(",") if origin.strip()]

if "*" in ALLOWED_ORIGINS:
    if IS_PRODUCTION:
        print("=" * 70)
        print("CRITICAL ERROR: Wildcard CORS (*) not allowed in production!")
        print("=" * 70)
        print("\nCurrent ALLOWED_ORIGINS contains wildcard '*'")
        print("\nSet specific origins in your .env file:")
        print("  ALLOWED_ORIGINS=https://yourdomain.com,https://app.yourdomain.com")
        print("\n" + "=" * 70)
        sys.exit(1)
    else:
        print("\n⚠️  WARNING: Wildcard CORS (*) detected in development mode")
        print("   This should NOT be used in production!\n")

if IS_PRODUCTION and DATABASE_URL.startswith("sqlite"):
    print("\n⚠️  WARNING: SQLite database configured in production mode\n")
