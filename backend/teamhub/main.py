import logging
import time
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from teamhub.api.v1 import invitations, notifications, projects, tasks, users
from teamhub.core.config import settings
from teamhub.core.exceptions import ServiceError
from teamhub.database import engine

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Project collaboration backend: members, invitations, tasks and notifications",
    version="1.0.0",
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Service error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.PROJECT_NAME}


@app.get("/healthz")
def health_detailed() -> Dict[str, object]:
    """Liveness plus a round trip to the database."""
    started = time.perf_counter()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = {"status": "ok"}
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", exc)
        database = {"status": "error", "error": str(exc)}
    database["elapsed_ms"] = round((time.perf_counter() - started) * 1000.0, 2)

    return {
        "service": settings.PROJECT_NAME,
        "status": "healthy" if database["status"] == "ok" else "degraded",
        "db": database,
    }


app.include_router(users.router, prefix=settings.API_V1_STR, tags=["users"])
app.include_router(projects.router, prefix=f"{settings.API_V1_STR}/projects", tags=["projects"])
app.include_router(invitations.router, prefix=f"{settings.API_V1_STR}/invitations", tags=["invitations"])
app.include_router(tasks.router, prefix=f"{settings.API_V1_STR}/tasks", tags=["tasks"])
app.include_router(notifications.router, prefix=f"{settings.API_V1_STR}/notifications", tags=["notifications"])
