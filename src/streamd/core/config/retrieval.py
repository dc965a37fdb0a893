"""Selection of the retrieval strategy (fan-out or polling)."""

from __future__ import annotations

from streamd.core.logging import get_logger

from .components import RetrievalMode

logger = get_logger(__name__)


class RetrievalModeResolver:
    """Picks FANOUT or POLLING from three signals.

    Precedence, highest first:

    1. an explicit ``retrievalMode`` of FANOUT or POLLING;
    2. the polling-only ``maxRecords`` having been set → POLLING;
    3. otherwise FANOUT.
    """

    def resolve(self, explicit_mode: RetrievalMode, polling_field_is_set: bool) -> RetrievalMode:
        if explicit_mode in (RetrievalMode.FANOUT, RetrievalMode.POLLING):
            mode, reason = explicit_mode, "explicit"
        elif polling_field_is_set:
            mode, reason = RetrievalMode.POLLING, "maxRecords"
        else:
            mode, reason = RetrievalMode.FANOUT, "default"
        logger.debug("retrieval_mode_selected", mode=mode.value, reason=reason)
        return mode
