#  Agent Dashboard - Health Route
#
#  Liveness plus database availability. Always 200; the database field
#  reports whether the handle initialized.
#
#  Depends on: container.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends

from dashboard.container import Container
from dashboard.db.connection import Database

router = APIRouter(tags=["health"])


@router.get("/health")
@inject
async def health(db: Database = Depends(Provide[Container.db])) -> dict:
    return {"status": "ok", "database": "ok" if db.available else "unavailable"}
