"""
Logging setup for the MovieMaster API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called, so records
from the connection manager, the token verifier and the services share
one format.  When the process already configured logging, for example
uvicorn with ``--log-config``, the root handlers are left alone.  The
MongoDB driver and Firebase Admin loggers are capped at ``WARNING`` in
both cases; their debug output (server heartbeats, certificate fetches)
would otherwise drown the request logs.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("pymongo", "motor", "firebase_admin", "cachecontrol")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure logging for the API process.

    Parameters
    ----------
    level : str
        Level name for the root logger (``"DEBUG"``, ``"INFO"``...).
        Unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Optional path of a file receiving the same records as the
        console (``LOG_FILE``).
    """
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
