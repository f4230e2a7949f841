"""
Wingman API - local HTTP surface for the desktop UI.
"""

from .routes import router
from .server import create_app

__all__ = ["router", "create_app"]
