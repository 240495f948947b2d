"""View Cache: per-path revision counters marking rendered views stale.

Invariants:
    - revision(path) is 0 until the path is first invalidated
    - invalidate(path) strictly increases revision(path)
    - Paths are normalized (trailing slash stripped) so /a and /a/ share a revision

Design Decisions:
    - Process-local counters: single-process deployment, revisions reset on restart
      and clients simply refetch once
    - Revisions exposed as ETags by read routes instead of caching rendered bodies
"""

import logging
import threading
from functools import lru_cache

logger = logging.getLogger(__name__)


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


class ViewCache:
    """In-process implementation of the ViewInvalidator protocol."""

    def __init__(self) -> None:
        self._revisions: dict[str, int] = {}
        self._lock = threading.Lock()

    def invalidate(self, path: str) -> None:
        key = _normalize(path)
        with self._lock:
            self._revisions[key] = self._revisions.get(key, 0) + 1
            revision = self._revisions[key]
        logger.info(
            f"View invalidated (revision {revision})", extra={"path": key},
        )

    def revision(self, path: str) -> int:
        return self._revisions.get(_normalize(path), 0)

    def etag(self, path: str) -> str:
        return f'W/"{_normalize(path)}:{self.revision(path)}"'


@lru_cache
def get_view_cache() -> ViewCache:
    return ViewCache()
