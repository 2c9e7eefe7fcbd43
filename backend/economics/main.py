# Booking economics backend entrypoint: pure calculators exposed over FastAPI.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.economics.api import economics
from backend.economics.core.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
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

app.include_router(economics.router)


@app.get("/")
def read_root():
    return {"app": "Booking Economics backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
