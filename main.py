"""
Entry point for the Randobot API
"""
import uvicorn

from randobot.api.app import create_app
from randobot.api.config import settings
from randobot.logging_setup import configure_logging

configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

# Create FastAPI app instance
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD
    )
