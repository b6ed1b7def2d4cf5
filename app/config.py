from dotenv import load_dotenv
import os
from pathlib import Path

# Load environment variables from .env file
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

# Database configuration
DB_HOST = os.getenv("MYSQL_HOST", "db")
DB_USER = os.getenv("MYSQL_USER", "user")
DB_PASSWORD = os.getenv("MYSQL_PASSWORD", "123456")
DB_NAME = os.getenv("MYSQL_DB", "brokerage")
DB_PORT = os.getenv("MYSQL_PORT", "3306")

# JWT configuration
SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key_here")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
JWT_ISSUER = os.getenv("JWT_ISSUER", "brokerage-api")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "brokerage-frontend")

# One-time password configuration
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "300"))

# Federated login
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")

# Application configuration
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))

# Frontend login page linked from invitation emails
LOGIN_URL = os.getenv("LOGIN_URL", "http://localhost:5173/login")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SQL_LOG_LEVEL = os.getenv("SQL_LOG_LEVEL", "WARNING").upper()

# Email configuration
EMAIL_FROM = os.getenv("EMAIL_FROM", "no-reply@brokerage.com")
EMAIL_FROM_NAME = os.getenv("EMAIL_FROM_NAME", "Real Estate Management")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "1025"))
EMAIL_SERVER = os.getenv("EMAIL_SERVER", "mailhog")
EMAIL_USERNAME = os.getenv("EMAIL_USERNAME", "")
EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD", "")
EMAIL_STARTTLS = os.getenv("EMAIL_STARTTLS", "false").lower() == "true"
EMAIL_SUPPRESS_SEND = os.getenv("EMAIL_SUPPRESS_SEND", "false").lower() == "true"

# Database URL
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
