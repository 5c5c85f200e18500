#!/usr/bin/env python3
"""
Overlap backend entry point
"""

import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from overlap.core.config import settings
from overlap.core.errors import register_error_handlers
from overlap.api import api_router
from overlap.core.database import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Overlap party game backend: rooms, rounds, answers and votes",
    version=settings.VERSION,
    debug=settings.DEBUG,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers
register_error_handlers(app)

# API routes
app.include_router(api_router, prefix="/api")

@app.on_event("startup")
async def startup_event():
    """Initialise the database on startup"""
    logger.info("🚀 Starting %s backend...", settings.APP_NAME)
    init_db()

@app.get("/")
async def root():
    """Root health check"""
    return {"message": f"{settings.APP_NAME} backend running", "status": "healthy"}

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "overlap"}

if __name__ == "__main__":
    uvicorn.run(
        "overlap.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
