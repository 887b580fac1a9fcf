#!/usr/bin/env python3
"""Serve the ACADNET API with uvicorn.

HOST, PORT and WORKERS come from the environment; RELOAD=true runs a single
auto-reloading worker for development.
"""

import os

import setproctitle
import uvicorn

from models.common import parse_bool, parse_int

if __name__ == "__main__":  # pragma: no cover
    reload = parse_bool(os.getenv("RELOAD", False))
    setproctitle.setproctitle("Acadnet DEV API" if reload else "Acadnet API")
    uvicorn.run(
        "app:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=parse_int(os.getenv("PORT"), 3626),
        reload=reload,
        workers=None if reload else parse_int(os.getenv("WORKERS"), 2),
        log_level="info",
        proxy_headers=True,
    )
