"""FastAPI entrypoint for the hostel kitchen ordering service."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from hostel_orders.api.v1.api import api_router
from hostel_orders.core.config import settings
from hostel_orders.db import session as db_session
from hostel_orders.db.base import Base
from hostel_orders.db.seed import ensure_seed_data
from hostel_orders.services.admin_service import ensure_default_admin

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            ensure_seed_data(session)
            admin_present = ensure_default_admin(session)
            logger.info("[BOOTSTRAP] admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Seed/bootstrap failed; continuing startup.")


@app.get("/")
def root() -> dict[str, str]:
    return {"service": settings.app_name, "status": "ok"}
