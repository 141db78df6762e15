"""QuoteDesk backend entrypoint."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quotedesk.app.api import analytics, auth, clients, exports, goals, items, quotations, templates
from quotedesk.app.core.errors import QuoteDeskError
from quotedesk.app.core.logging import configure_logging
from quotedesk.app.core.settings import get_settings
from quotedesk.app.db.base import Base
from quotedesk.app.db.session import engine

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(items.router)
app.include_router(templates.router)
app.include_router(quotations.router)
app.include_router(goals.router)
app.include_router(analytics.router)
app.include_router(exports.router)


@app.exception_handler(QuoteDeskError)
async def quotedesk_error_handler(request: Request, exc: QuoteDeskError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def read_root():
    return {"app": "QuoteDesk backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok", "environment": settings.environment}


@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started ({settings.environment})")
