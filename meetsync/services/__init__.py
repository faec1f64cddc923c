"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .meeting_service import (
    CreateMeetingResult,
    MeetingResults,
    MeetingService,
    MeetingStoreProtocol,
    VoteResult,
)

__all__ = [
    "CreateMeetingResult",
    "MeetingResults",
    "MeetingService",
    "MeetingStoreProtocol",
    "VoteResult",
]
