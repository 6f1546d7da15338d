# dbqueue/backend/app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.queues import router as queues_router
from .errors import ConsistencyError, StoreError, ValidationError
from .logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="dbqueue message queue")
app.include_router(queues_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(ConsistencyError)
async def consistency_error_handler(request: Request, exc: ConsistencyError):
    logger.error("Queue store inconsistency on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok"}
