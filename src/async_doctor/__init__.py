"""
Async Doctor - async/await anti-pattern analysis

Finds eight async anti-patterns in JavaScript and TypeScript sources,
records task lifecycles of running asyncio programs, and cross-references
the two so each finding shows how often its code actually ran.
"""

__version__ = "0.1.0"

from .analysis import StaticAnalyzer, apply_fix
from .correlation import correlate, load_trace, merge
from .models import DynamicOverlay, Finding, MergedReport, PromiseEvent, StaticReport
from .tracer import Tracer, attach, detach

__all__ = [
    "StaticAnalyzer",  # Main entry point
    "apply_fix",
    "correlate",
    "merge",
    "load_trace",
    "Tracer",
    "attach",
    "detach",
    "Finding",
    "StaticReport",
    "PromiseEvent",
    "DynamicOverlay",
    "MergedReport",
]
