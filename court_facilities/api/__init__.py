"""
HTTP API for court facilities.
"""

from .routes import router

__all__ = ["router"]
