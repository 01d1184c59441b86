"""Loan versus SIP projection and surplus allocation engine."""

from .engine import project, summarize
from .portfolio import Portfolio

__all__ = ["project", "summarize", "Portfolio"]
