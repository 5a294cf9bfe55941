import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config import settings
from database import create_db_and_tables

from api import backup, categories, reviews

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 App starting up...")
    create_db_and_tables()
    yield
    logger.info("🛑 App shutting down...")


app = FastAPI(lifespan=lifespan, title="MyReview Backend")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

os.makedirs("static", exist_ok=True)
os.makedirs(settings.ATTACHMENT_DIR, exist_ok=True)

# Static files (review photos live under static/)
app.mount("/static", StaticFiles(directory="static"), name="static")

# Routers
app.include_router(categories.router)
app.include_router(reviews.router)
app.include_router(backup.router)


@app.get("/")
def read_root():
    return {"message": "Backend running and connected to DB!"}
