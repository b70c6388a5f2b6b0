"""SPA Static Files — serves the front-end bundle with client-side-routing fallback.

Invariants:
    - Existing files are served as-is (html=True also maps "/" to index.html)
    - Any path that matches no file is answered with index.html
    - Only mounted when the bundle directory exists

Design Decisions:
    - Subclass StaticFiles instead of a catch-all route: keeps caching headers,
      range requests and HEAD handling from Starlette
    - API paths never reach this mount (the /api catch-all route answers first)
"""

import logging
import os

from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

INDEX_FILE = "index.html"


class SPAStaticFiles(StaticFiles):
    """StaticFiles that falls back to index.html for unknown paths."""

    async def get_response(self, path: str, scope: Scope):
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response(INDEX_FILE, scope)


def build_spa_app(directory: str) -> SPAStaticFiles | None:
    """Return the static app for the bundle, or None when it is not built."""
    if not os.path.isdir(directory):
        logger.info(f"Front-end bundle not found at {directory}; static serving disabled")
        return None
    return SPAStaticFiles(directory=directory, html=True)
