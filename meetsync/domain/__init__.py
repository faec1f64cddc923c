"""
Domain layer - Pure business logic without external dependencies.
"""

from .code_generator import CodeGenerator
from .models import BestSlot, Meeting, Participant, VoteSummary
from .slot_generator import SlotGenerator
from .vote_aggregator import VoteAggregator

__all__ = [
    "BestSlot",
    "CodeGenerator",
    "Meeting",
    "Participant",
    "SlotGenerator",
    "VoteAggregator",
    "VoteSummary",
]
