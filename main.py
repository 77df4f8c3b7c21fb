from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import logging
import time

import settings
from asset_status import seed_statuses
from db import Base, SessionLocal, engine
from dependencies import get_db, session_scope
from errors import LibraryServiceError, Reason
from routers import ALL_ROUTERS

import orm

# -----------------------
# Logging
# -----------------------
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title="Circulation API")

Base.metadata.create_all(bind=engine)
with session_scope() as _db:
    seed_statuses(_db)

STATUS_CODES = {
    Reason.NOT_FOUND: 404,
    Reason.CONFLICT: 409,
    Reason.UNCAUGHT_ERROR: 500,
    Reason.CONFIGURATION_ERROR: 500,
}

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    elapsed_ms = int((time.time() - start) * 1000)
    logger.info(
        "method=%s path=%s status=%s elapsed_ms=%s",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response

@app.exception_handler(LibraryServiceError)
async def library_error_handler(request: Request, exc: LibraryServiceError):
    status_code = STATUS_CODES.get(exc.reason, 500)
    if status_code >= 500:
        logger.error("path=%s reason=%s %s", request.url.path, exc.reason.value, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "reason": exc.reason.value},
    )

for router in ALL_ROUTERS:
    app.include_router(router)

@app.get("/")
def root():
    return {"message": "Circulation API", "docs": "/docs"}
