"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from api.routes import admin, auth
from core.database import SessionLocal, init_db, storage_enabled
from utils.storage_manager import StorageManager

# Setup logging
setup_logging()

# Initialize FastAPI application
app = FastAPI(
    title="UniPortal Auth API",
    description="Authentication service for the UniPortal academic portal.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(admin.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Create tables and seed the demo accounts on first start."""
    if not storage_enabled():
        return
    init_db()
    db = SessionLocal()
    try:
        StorageManager(db).initialize()
    finally:
        db.close()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links."""
    return {
        "name": "UniPortal Auth API",
        "version": "1.0.0",
        "description": "Authentication service for the UniPortal academic portal.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Service: {server_url}")
    print(f"API docs: {server_url}/docs")

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
