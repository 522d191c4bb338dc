"""
Room inventory for court buildings.
"""

from court_facilities.facilities.service import FacilitiesService

__all__ = ["FacilitiesService"]
