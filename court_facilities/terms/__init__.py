"""
Court term scheduling.
"""

from court_facilities.terms.service import TermService

__all__ = ["TermService"]
