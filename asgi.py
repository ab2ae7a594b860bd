"""
asgi.py -- Application assembly for the GiftLink account service.

The ASGI entry point servers import. api/main.py owns the FastAPI app; this
module only exposes it under the conventional name.

Run with:  uvicorn asgi:app --reload
"""

from api.main import app

__all__ = ["app"]
