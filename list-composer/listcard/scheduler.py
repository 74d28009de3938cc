"""
RenderCoordinator - last-request-wins bookkeeping for repeated renders.

A caller that re-renders the same target (e.g. after switching export
format) only wants the newest result. Every request gets a ticket; a
result whose ticket is no longer the newest for its target is stale and
dropped. Renders themselves are never cancelled.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Hashable, Optional, Union

from .models import DesignSettings, ListContent
from .generator import RasterImage, RenderPipeline
from .presets import ExportFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderTicket:
    """Identity of one render request for a target."""
    target: Hashable
    request_id: int


class RenderCoordinator:
    """Tracks the newest request per target."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest: Dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def begin(self, target: Hashable) -> RenderTicket:
        """Register a new request; older tickets for the target become stale."""
        with self._lock:
            request_id = next(self._counter)
            self._latest[target] = request_id
        return RenderTicket(target=target, request_id=request_id)

    def is_current(self, ticket: RenderTicket) -> bool:
        with self._lock:
            return self._latest.get(ticket.target) == ticket.request_id

    def is_pending(self, target: Hashable) -> bool:
        """True while a request for ``target`` is in flight."""
        with self._lock:
            return target in self._latest

    def finish(self, ticket: RenderTicket) -> None:
        """Forget the target if this ticket is still the newest."""
        with self._lock:
            if self._latest.get(ticket.target) == ticket.request_id:
                del self._latest[ticket.target]

    async def render(
        self,
        target: Hashable,
        pipeline: RenderPipeline,
        content: ListContent,
        settings: DesignSettings,
        export_format: Union[ExportFormat, str, None] = None,
    ) -> Optional[RasterImage]:
        """
        Render for ``target`` and return the result if still wanted.

        Returns:
            RasterImage, or None when a newer request for the same target
            was issued while this one ran
        """
        ticket = self.begin(target)
        try:
            result = await pipeline.render_async(content, settings, export_format)
            if not self.is_current(ticket):
                logger.info(f"Discarding stale render {ticket.request_id} for {target!r}")
                return None
            return result
        finally:
            self.finish(ticket)
