from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .adjustments.controller import register as register_adjustments
from .container import Container, build_container
from .core.constants import DEFAULT_INVOICE_DUE_DAYS, DEFAULT_INVOICE_NUMBER_START
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig
from .invoices.controller import register as register_invoices
from .ledger.controller import register as register_ledger
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass a prebuilt `container` to skip database bootstrap (used by the test suite).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            due_days=int(getattr(settings, "INVOICE_DUE_DAYS", DEFAULT_INVOICE_DUE_DAYS)),
            invoice_number_start=int(getattr(settings, "INVOICE_NUMBER_START", DEFAULT_INVOICE_NUMBER_START)),
            allow_paid_slip_deletion=bool(getattr(settings, "ALLOW_PAID_SLIP_DELETION", True)),
        )

    app.extensions["schoolflow"] = container

    register_invoices(app, container)
    register_payroll(app, container)
    register_adjustments(app, container)
    register_ledger(app, container)

    return app
