"""
Task Manager - FastAPI Server
CRUD API for task records backed by a SQL database
"""

from datetime import datetime, timezone
import logging

import uvicorn

import config
from taskmanager.api import API_VERSION, create_app
from taskmanager.database import DatabaseConfig, DatabaseManager
from taskmanager.logging_setup import configure_logging
from taskmanager.service import TaskLifecycleManager
from taskmanager.store import SQLAlchemyTaskStore

# Setup logging
configure_logging(config.LOG_LEVEL, config.LOG_FILE, config.LOG_JSON)
logger = logging.getLogger(__name__)

# Wire database -> store -> manager -> app
db_manager = DatabaseManager(DatabaseConfig(
    database_url=config.DATABASE_URL,
    pool_size=config.DB_POOL_SIZE,
    max_overflow=config.DB_MAX_OVERFLOW,
    pool_timeout=config.DB_POOL_TIMEOUT,
    pool_recycle=config.DB_POOL_RECYCLE,
    echo=config.DB_ECHO,
))
db_manager.initialize()

task_store = SQLAlchemyTaskStore(db_manager)
task_manager = TaskLifecycleManager(task_store)

app = create_app(task_manager, allowed_origins=config.ALLOWED_ORIGINS)

@app.get("/health")
def health_check():
    """Health check endpoint with database status."""
    database_ok = task_store.ping()

    return {
        "status": "healthy" if database_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "environment": config.ENVIRONMENT,
        "database": "reachable" if database_ok else "unreachable",
    }

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "name": "Task Manager API",
        "version": API_VERSION,
        "status": "operational",
        "docs": "/docs"
    }


if __name__ == "__main__":
    uvicorn.run(
        "api_server:app",
        host=config.API_HOST,
        port=config.API_PORT,
        workers=config.API_WORKERS,
        reload=False,
        log_level=config.LOG_LEVEL.lower()
    )
