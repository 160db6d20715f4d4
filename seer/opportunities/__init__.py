"""Opportunities: the durable store of scored, deduplicated items."""

from seer.opportunities.repository import OpportunityRepository
from seer.opportunities.schemas import Opportunity, OpportunityStats
from seer.opportunities.service import OpportunityStore

__all__ = [
    "Opportunity",
    "OpportunityRepository",
    "OpportunityStats",
    "OpportunityStore",
]
