"""
Serverless entry point.

Python serverless runtimes import this module and serve the ASGI ``app`` it
exposes for every request under ``/api``; routing happens inside FastAPI.
"""

from app.main import app

__all__ = ["app"]
