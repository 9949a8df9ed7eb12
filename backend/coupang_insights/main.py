"""
Coupang Insights - FastAPI Application
Sales, product master and inbound uploads turned into stock-risk analytics.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coupang_insights import __version__
from coupang_insights.api import routes
from coupang_insights.config.settings import settings
from coupang_insights.models import create_tables

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield


app = FastAPI(
    title="Coupang Insights",
    description="Know which products run out of stock this week",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {
        "message": "Coupang Insights API",
        "docs": "/docs",
        "health": "ok"
    }
