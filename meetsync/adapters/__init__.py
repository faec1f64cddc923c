"""
Adapters layer - Meeting storage backends.
"""

from .json_store import JsonFileMeetingStore
from .memory_store import InMemoryMeetingStore

__all__ = ["InMemoryMeetingStore", "JsonFileMeetingStore"]
