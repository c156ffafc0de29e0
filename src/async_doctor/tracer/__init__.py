"""Runtime tracer for asyncio tasks and futures.

Records one event per tracked task (creation, end, call site, causal
parent) and writes them as a JSON array when the process exits.
"""

from .callsite import IO, LIBRARY, USER, CallSite, CallSiteResolver
from .exit_hooks import ExitHooks
from .instrument import AsyncioInstrumentation
from .recorder import TraceRecorder
from .runner import run_traced
from .session import Tracer, active_tracer, attach, detach

__all__ = [
    "Tracer",
    "attach",
    "detach",
    "active_tracer",
    "run_traced",
    "TraceRecorder",
    "CallSite",
    "CallSiteResolver",
    "AsyncioInstrumentation",
    "ExitHooks",
    "USER",
    "LIBRARY",
    "IO",
]
