"""
Top‑level package for the MovieMaster API.

All functionality lives in submodules under ``app``; the ASGI
application is ``movie_master_api.app.main:app``.
"""

__all__ = []
