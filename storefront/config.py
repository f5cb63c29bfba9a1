# config.py

import os
import secrets
from dotenv import load_dotenv

# Get the base directory of the application
basedir = os.path.abspath(os.path.dirname(__file__))

# This line finds the .env file in your root directory and loads it.
load_dotenv(os.path.join(basedir, '..', '.env'))
# --------------------------------------


def _resolve_secret_key():
    """
    Return the secret used to sign session tokens.

    Deployments are expected to set ``SECRET_KEY``. When it is missing, such as
    during local testing, a temporary key is generated so the app can boot.
    Tokens signed with it stop validating when the process restarts.
    """
    return os.environ.get('SECRET_KEY') or secrets.token_hex(32)


class Config:
    """
    Contains all the configuration variables for the application.

    Values are read from the environment once, when this module is imported.
    The class itself is handed to ``create_app`` so tests and the serverless
    adapter can pass a different configuration without touching os.environ.
    """
    # --- Database Settings ---
    # Reads the database URL from the .env file.
    # No default: an absent value means the API serves fallback data.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    # Creates the tables before the schema validation query (dev and tests only).
    AUTO_CREATE_SCHEMA = False

    # --- Runtime Mode ---
    # VERCEL is set by the hosting platform for every serverless invocation.
    HOSTED = bool(os.environ.get('VERCEL'))
    APP_ENV = os.environ.get('APP_ENV', 'development').lower()
    DEBUG_ERRORS = APP_ENV == 'development'
    PORT = int(os.environ.get('PORT') or 3001)

    # --- Secret Key ---
    SECRET_KEY = _resolve_secret_key()

    # --- CORS ---
    FRONTEND_URL = os.environ.get('FRONTEND_URL') or 'http://localhost:5000'
    CORS_ORIGINS = [
        'http://localhost:5000',
        'https://atomvercel20.vercel.app',
        FRONTEND_URL,
    ]
    # Any Vercel deployment URL
    CORS_ORIGIN_PATTERN = r'^https://.*\.vercel\.app$'

    # --- Body Parsing ---
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # --- Rate Limiting (Flask-Limiter) ---
    RATE_LIMIT = '200 per minute'
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI') or 'memory://'
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_HEADER_LIMIT = 'RateLimit-Limit'
    RATELIMIT_HEADER_REMAINING = 'RateLimit-Remaining'
    RATELIMIT_HEADER_RESET = 'RateLimit-Reset'
    RATE_LIMIT_RETRY_AFTER = 60

    # --- Session Token Cookie ---
    JWT_COOKIE_NAME = 'token'
    JWT_EXPIRES_HOURS = 24
    JWT_COOKIE_SECURE = APP_ENV == 'production'


class HostedConfig(Config):
    """Configuration for serverless invocations: production mode, no eager database."""
    HOSTED = True
    APP_ENV = 'production'
    DEBUG_ERRORS = False
    JWT_COOKIE_SECURE = True


def get_config():
    """Picks the configuration class for the current process."""
    return HostedConfig if Config.HOSTED else Config
