import logging

from fastapi import FastAPI

from .config import get_settings
from .routes import router as api_router

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(title=settings.app_name)

# API routes
app.include_router(api_router)
