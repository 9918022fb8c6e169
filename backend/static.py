# =============================================================================
# backend/static.py - Fall-Through Static Files
# =============================================================================
# Serves files from the public directory, but only claims a request when the
# path maps to a file that exists. Anything else falls through to the routes
# registered after it (the root handler, then the default 404).
#
# A plain app.mount("/", StaticFiles(...)) would swallow every request.
# =============================================================================

import logging
import os
import stat
from pathlib import Path

from starlette.routing import BaseRoute, Match, NoMatchFound
from starlette.staticfiles import StaticFiles
from starlette.types import Receive, Scope, Send

logger = logging.getLogger(__name__)


class PublicFilesRoute(BaseRoute):
    """
    Route that matches GET/HEAD requests for existing files under `directory`.

    A directory path is served through its index.html, if it has one.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.files = StaticFiles(directory=self.directory, html=True, check_dir=False)

    def _exists(self, scope: Scope) -> bool:
        path = self.files.get_path(scope)
        full_path, stat_result = self.files.lookup_path(path)
        if stat_result is None:
            return False
        if stat.S_ISDIR(stat_result.st_mode):
            _, stat_result = self.files.lookup_path(os.path.join(path, "index.html"))
            return stat_result is not None and stat.S_ISREG(stat_result.st_mode)
        return stat.S_ISREG(stat_result.st_mode)

    def matches(self, scope: Scope) -> tuple[Match, Scope]:
        if scope["type"] != "http" or scope["method"] not in ("GET", "HEAD"):
            return Match.NONE, {}
        if not self._exists(scope):
            return Match.NONE, {}
        return Match.FULL, {}

    async def handle(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.debug(f"Serving static file for {scope['path']}")
        await self.files(scope, receive, send)

    def url_path_for(self, name: str, /, **path_params):
        raise NoMatchFound(name, path_params)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(directory={str(self.directory)!r})"
