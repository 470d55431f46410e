import logging
import threading
from copy import deepcopy

from offmcp.protocol.common import EmptyResult
from offmcp.protocol.roots import Root, UpdateRootsRequest


class RootsRegistry:
    """Holds the client-granted roots and answers access checks against them.

    One registry is owned by each server session and handed to its router.
    Updates swap the whole list under a lock; checks read a single snapshot,
    so a check never sees half of an update.
    """

    def __init__(self, roots: list[Root] | None = None):
        self._roots: tuple[Root, ...] = tuple(roots or ())
        self._lock = threading.Lock()
        self.logger = logging.getLogger("offmcp.server.roots")

    def update_roots(self, roots: list[Root]) -> None:
        """Replace the current roots with a new set. No merging."""
        new_roots = tuple(deepcopy(roots))
        with self._lock:
            self._roots = new_roots
        self.logger.info(
            f"Updating roots: {[root.to_protocol() for root in new_roots]}"
        )

    def get_roots(self) -> list[Root]:
        """Get a copy of the current roots."""
        return deepcopy(list(self._roots))

    def is_within_roots(self, uri: str) -> bool:
        """Check whether a URI falls under any root.

        An empty root set allows everything. Matching is a literal string
        prefix test: no trailing-slash, case or percent-encoding normalization.
        """
        roots = self._roots
        if not roots:
            return True

        return any(uri.startswith(root.uri) for root in roots)

    def most_specific_root(self, uri: str) -> Root | None:
        """Get the matching root with the longest URI.

        Ties go to the root listed first. Returns None when no root matches,
        including when no roots are set.
        """
        best: Root | None = None
        for root in self._roots:
            if uri.startswith(root.uri) and (
                best is None or len(root.uri) > len(best.uri)
            ):
                best = root
        return best

    async def handle_update_roots(self, request: UpdateRootsRequest) -> EmptyResult:
        """Handle a client roots/update request."""
        self.update_roots(request.items)
        return EmptyResult()
