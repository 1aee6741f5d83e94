"""
asgi.py -- ASGI entry point for Inkwell.

Run with:  uvicorn asgi:app --reload
           python asgi.py            (binds Settings.host / Settings.port)
"""

import uvicorn

from api.main import app
from core.config import get_settings

__all__ = ["app"]

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
