"""
Entry point for the limba-insights API service.

Run with:
    uvicorn main:app --reload --port 8110
    python main.py
"""
import uvicorn

from config import get_settings
from limba_insights.api.main import app

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "limba_insights.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
