"""Static analysis: rule engine traversal, report building, fix application."""

from .analyzer import StaticAnalyzer, build_report
from .engine import EngineMatch, RuleEngine
from .fixer import FixOutcome, apply_fix
from .report import load_report, write_report

__all__ = [
    "StaticAnalyzer",
    "build_report",
    "RuleEngine",
    "EngineMatch",
    "apply_fix",
    "FixOutcome",
    "load_report",
    "write_report",
]
