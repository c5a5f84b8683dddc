import os

SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Settings module for APP_ENV; anything unrecognised runs as development."""

    env = os.getenv("APP_ENV", "development").strip().lower()
    return SETTINGS_BY_ENV.get(env, "config.development")
