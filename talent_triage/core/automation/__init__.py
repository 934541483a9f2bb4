"""Threshold-driven automatic shortlisting and rejection."""

from .rule_engine import AutomationRuleEngine, decide

__all__ = [
    "AutomationRuleEngine",
    "decide",
]
