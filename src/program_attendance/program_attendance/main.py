from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_local
from .container import build_container
from .refunds.controller import register as register_refunds
from .storage.memory import InMemoryStore
from .storage.seed import seed_demo
from .tokens.controller import register as register_tokens


def create_app(settings_module: Optional[str] = None, *, store: Optional[InMemoryStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    checkin_config = getattr(settings, "CHECKIN_CONFIG")

    if app.config["DEBUG"]:
        print(
            "[program-attendance] settings=", settings_module,
            " base_url=", checkin_config.get("base_url"),
            " token_window_ms=", checkin_config.get("validity_window_ms"),
        )

    container = build_container(checkin_config=checkin_config, store=store)

    if bool(getattr(settings, "SEED_DEMO_DATA", False)):
        seed_demo(container.store, now=now_local())
        if app.config["DEBUG"]:
            print("[program-attendance] demo seed ready")

    register_tokens(app, container)
    register_attendance(app, container)
    register_refunds(app, container)

    @app.route("/health")
    def health():
        return {"status": "ok", "service": "program-attendance"}

    return app
