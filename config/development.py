import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Profile pictures land here.
PHOTO_DIR = os.getenv("PHOTO_DIR", "static/photos")

# Dropdown options (roles/branches/programs/subjects) are cached this long; writes invalidate them.
LOOKUP_CACHE_SECONDS = float(os.getenv("LOOKUP_CACHE_SECONDS", "300"))

PERMISSIONS = {
    "users": ["view", "create", "update", "delete"],
    "programs": ["view", "create", "update", "delete"],
}

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
