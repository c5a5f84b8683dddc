import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

PHOTO_DIR = os.getenv("PHOTO_DIR", "/tmp/school_admin_photos")
LOOKUP_CACHE_SECONDS = 0.0

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
