import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "school_admin"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PHOTO_DIR = os.getenv("PHOTO_DIR", "static/photos")
LOOKUP_CACHE_SECONDS = float(os.getenv("LOOKUP_CACHE_SECONDS", "300"))

PERMISSIONS = {
    "users": ["view", "create", "update", "delete"],
    "programs": ["view", "create", "update", "delete"],
}

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
