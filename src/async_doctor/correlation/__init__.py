"""Cross-referencing runtime traces with static findings."""

from .correlator import correlate
from .merger import merge
from .trace_io import events_from_data, load_trace, parse_location, parse_trace, relative_location

__all__ = [
    "correlate",
    "merge",
    "load_trace",
    "events_from_data",
    "parse_trace",
    "parse_location",
    "relative_location",
]
