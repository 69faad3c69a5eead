from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .clock.controller import register as register_clock
from .container import build_container
from .core.logging_config import setup_logging
from .otp.controller import register as register_otp

logger = logging.getLogger(__name__)


def create_app(settings=None, **overrides) -> Flask:
    """Application factory.

    ``settings`` defaults to the module picked by ``APP_ENV``; ``overrides``
    are passed to ``build_container`` (``source``, ``notifier``,
    ``location_provider``).
    """
    load_dotenv(override=False)
    settings_module = None
    if settings is None:
        settings_module = get_settings_module()
        settings = importlib.import_module(settings_module)

    setup_logging(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        json_output=bool(getattr(settings, "LOG_JSON", False)),
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = build_container(settings=settings, **overrides)
    app.extensions["clock_sync"] = container

    logger.info(
        "clock-sync ready (settings=%s, source=%s)",
        settings_module or type(settings).__name__,
        type(container.source).__name__,
    )

    register_clock(app, container)
    register_attendance(app, container)
    register_otp(app, container)

    return app
