from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .branches.controller import register as register_branches
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .programs.controller import register as register_programs
from .subjects.controller import register as register_subjects
from .users.controller import register as register_users

LOGGER = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["PHOTO_DIR"] = getattr(settings, "PHOTO_DIR")
    app.config["PERMISSIONS"] = getattr(settings, "PERMISSIONS", {})

    LOGGER.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        LOGGER.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_accounts(db_config)
        LOGGER.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        lookup_ttl=getattr(settings, "LOOKUP_CACHE_SECONDS", None),
    )

    register_users(app, container)
    register_programs(app, container)
    register_branches(app, container)
    register_subjects(app, container)

    return app
