import os
import logging
from dotenv import load_dotenv

load_dotenv()

PORT = int(os.getenv("PORT", "3000"))

# Salesforce connected app
SF_CLIENT_ID = os.getenv("SF_CLIENT_ID", "")
SF_CLIENT_SECRET = os.getenv("SF_CLIENT_SECRET", "")
SF_REDIRECT_URI = os.getenv("SF_REDIRECT_URI", f"http://localhost:{PORT}/oauth/callback")
SF_LOGIN_URL = os.getenv("SF_LOGIN_URL", "https://login.salesforce.com").rstrip("/")
SF_API_VERSION = os.getenv("SF_API_VERSION", "59.0")
SF_TIMEOUT_SECONDS = float(os.getenv("SF_TIMEOUT_SECONDS", "120"))

# Browser session
SESSION_SECRET = os.getenv("SESSION_SECRET", "your-secret-key-change-this")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sf_loader_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(14 * 24 * 60 * 60)))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")
SESSION_STORE = os.getenv("SESSION_STORE", "database")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sessions.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Where uploaded CSV files are staged
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
os.makedirs(UPLOAD_DIR, exist_ok=True)


def configure_logging():
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
