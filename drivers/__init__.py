"""
Drivers domain package.

Public API:
- Domain models: Travel, TravelStatus
- Eligibility: filter_eligible_travels
"""
from .models import Travel, TravelStatus
from .selection import filter_eligible_travels

__all__ = ["Travel",
           "TravelStatus",
           "filter_eligible_travels",
           ]
