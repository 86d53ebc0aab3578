"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .gap_finder import CalendarClientProtocol, GapFinderService

__all__ = ["CalendarClientProtocol", "GapFinderService"]
