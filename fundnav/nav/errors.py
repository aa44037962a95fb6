"""Error kinds raised by the valuation core.

Every error aborts the whole calculation cycle; nothing is retried or clamped.
"""
from __future__ import annotations


class NavError(Exception):
    """Base class for valuation-cycle failures."""


class InvalidIndex(NavError, IndexError):
    """Share class index is out of range."""


class ArithmeticFault(NavError, ArithmeticError):
    """Overflow, underflow, division by zero or an out-of-range cast."""


class UnauthorizedCaller(NavError, PermissionError):
    """The mutating entry point was invoked by someone other than the orchestrator."""
