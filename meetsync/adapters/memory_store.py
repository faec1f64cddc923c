"""
Process-local meeting store.
"""

from typing import Dict, List

from ..domain.models import Meeting


class InMemoryMeetingStore:
    """
    Keeps meetings in a dict for the lifetime of the process.

    Meetings are copied on the way in and out, so a caller mutating the
    object it got from ``get`` changes nothing until it calls ``put``.
    """

    def __init__(self) -> None:
        self._meetings: Dict[str, Meeting] = {}

    def get(self, code: str) -> Meeting | None:
        meeting = self._meetings.get(code)
        return meeting.copy() if meeting is not None else None

    def put(self, code: str, meeting: Meeting) -> None:
        self._meetings[code] = meeting.copy()

    def list_codes(self) -> List[str]:
        return list(self._meetings)
