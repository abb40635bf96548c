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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./tasks.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Shared secret for HS256/HS384/HS512 tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    # Optional; when set, the iss claim must match and the default key set URL derives from it
    JWT_ISSUER = data.get("JWT_ISSUER")
    JWT_AUDIENCE = data.get("JWT_AUDIENCE")
    # Overrides <JWT_ISSUER>/.well-known/jwks.json
    JWKS_URL = data.get("JWKS_URL")
    JWKS_TIMEOUT_SECONDS = data.get("JWKS_TIMEOUT_SECONDS", 5)
    JWKS_CACHE_TTL_SECONDS = data.get("JWKS_CACHE_TTL_SECONDS", 600)
    JWKS_COOLDOWN_SECONDS = data.get("JWKS_COOLDOWN_SECONDS", 30)
