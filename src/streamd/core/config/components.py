"""
Enumerations for the daemon's pluggable configuration dimensions.

Each enum is a ``str`` enum so resolved values serialise cleanly.  Values
coming from a settings file are matched case-insensitively by
:class:`~streamd.core.config.converters.TypeConverterRegistry`.
:class:`RetrievalMode` has its own parser because its ``UNSET`` member
exists in the model but can never be chosen from a setting.

Example::

    from streamd.core.config.components import RetrievalMode

    RetrievalMode.parse("Polling")   # RetrievalMode.POLLING
    RetrievalMode.parse("unset")     # raises ResolutionError
"""

from __future__ import annotations

from enum import Enum

from streamd.core.errors import ResolutionError

# ── Retrieval ────────────────────────────────────────────────────────────


class RetrievalMode(str, Enum):
    """How records are fetched from the stream.

    ``UNSET`` is the initial state of a configuration; it is resolved to
    ``FANOUT`` or ``POLLING`` and never accepted from a setting.
    """

    FANOUT = "fanout"
    POLLING = "polling"
    UNSET = "unset"

    @classmethod
    def parse(cls, text: str) -> RetrievalMode:
        """Parse a setting value, case-insensitively."""
        wanted = text.strip().lower()
        for mode in (cls.FANOUT, cls.POLLING):
            if mode.value == wanted:
                return mode
        raise ResolutionError(
            f"Unknown retrieval type: {text!r} (expected one of: fanout, polling)",
            type_name=text,
            setting="retrievalMode",
            expected="fanout|polling",
        )


# ── Stream position / metrics ────────────────────────────────────────────


class InitialPosition(str, Enum):
    """Where a worker starts reading a shard that has no checkpoint."""

    LATEST = "LATEST"
    TRIM_HORIZON = "TRIM_HORIZON"
    AT_TIMESTAMP = "AT_TIMESTAMP"


class MetricsLevel(str, Enum):
    """Granularity of the metrics the daemon emits."""

    NONE = "NONE"
    SUMMARY = "SUMMARY"
    DETAILED = "DETAILED"


# ── Engine policy ────────────────────────────────────────────────────────


class UnknownSettingPolicy(str, Enum):
    """What the binder does with a setting path it does not recognise."""

    FAIL = "fail"
    IGNORE = "ignore"
