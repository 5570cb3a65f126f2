# filmcatalog/services/api/routers/health.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from filmcatalog.common.settings import get_settings
from filmcatalog.services.api.deps import transactional_session

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    s = get_settings()
    return {
        "ok": True,
        "app": s.app_name,
        "env": s.app_env,
        "graphql": s.graphql.path,
    }


@router.get("/readyz")
def readyz(db: Session = Depends(transactional_session)):
    """Ready once the database answers."""
    db.execute(text("SELECT 1"))
    return {"ok": True, "db": db.get_bind().dialect.name}
