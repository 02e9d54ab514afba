import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from petbook.database import Base, engine
from petbook.config import settings
from petbook.core.errors import PetbookError

# Import models so SQLAlchemy registers tables
from petbook import models  # noqa: F401

# Routers
from petbook.routers import (
    account_router,
    pet_router,
    post_router,
    notification_router,
    chat_router,
    story_router,
    health_report_router,
)
from petbook.realtime import api as realtime_api

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("petbook")

# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Social core for pets, their guardians and pet professionals.",
    version="1.0.0",
)
logger.info("Starting %s (%s)", settings.PROJECT_NAME, settings.ENV)

# -----------------------
# CORS
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# DATABASE TABLES
# -----------------------
Base.metadata.create_all(bind=engine)


# -----------------------
# ERRORS
# -----------------------
@app.exception_handler(PetbookError)
async def petbook_error_handler(request: Request, exc: PetbookError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
async def store_unavailable_handler(request: Request, exc: OperationalError):
    logger.error("Store unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Service temporarily unavailable"})


# -----------------------
# ROUTES
# -----------------------
app.include_router(account_router.router)
app.include_router(pet_router.router)
app.include_router(post_router.router)
app.include_router(notification_router.router)
app.include_router(chat_router.router)
app.include_router(story_router.router)
app.include_router(health_report_router.router)
app.include_router(realtime_api.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/")
def root():
    return {"message": "PetBook API is running!"}
