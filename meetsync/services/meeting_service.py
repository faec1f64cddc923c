"""
Application service for creating meetings and collecting votes.

The service owns the orchestration: it validates input, asks the domain for
slots, codes and tallies, and talks to the meeting store through a small
protocol so the in-memory and file-backed stores are interchangeable.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, time
from typing import Any, Callable, Dict, Iterable, Iterator, List, Protocol

import pendulum
from pendulum import DateTime

from ..config import AppConfig
from ..domain.code_generator import DEFAULT_MAX_CODE_ATTEMPTS, CodeGenerator
from ..domain.exceptions import CodeSpaceExhaustedError, MeetingNotFoundError, ValidationError
from ..domain.models import BestSlot, Meeting, Participant, VoteSummary, canonicalize_slot
from ..domain.slot_generator import SlotGenerator
from ..domain.vote_aggregator import VoteAggregator
from .schemas import CreateMeetingRequest, VoteRequest, validate_input

logger = logging.getLogger(__name__)


class MeetingStoreProtocol(Protocol):
    """Key-value store for meetings, keyed by exact code."""

    def get(self, code: str) -> Meeting | None:
        """Return an independent copy of the stored meeting, or None."""

    def put(self, code: str, meeting: Meeting) -> None:
        """Store a copy of the meeting. Raises StorageError on failure."""

    def list_codes(self) -> List[str]:
        """Return all stored codes."""


@dataclass
class CreateMeetingResult:
    code: str
    meeting: Meeting

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "meeting": self.meeting.to_dict()}


@dataclass
class VoteResult:
    meeting: Meeting
    best_slots: List[BestSlot]
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        meeting = self.meeting.to_dict()
        meeting["bestSlots"] = [slot.to_dict() for slot in self.best_slots]
        return {"success": self.success, "meeting": meeting}


@dataclass
class MeetingResults:
    meeting: Meeting
    best_slots: List[BestSlot] = field(default_factory=list)
    votes_summary: List[VoteSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meeting": self.meeting.to_dict(),
            "bestSlots": [slot.to_dict() for slot in self.best_slots],
            "votesSummary": [tally.to_dict() for tally in self.votes_summary],
        }


@dataclass
class _CodeLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class MeetingService:
    """
    Orchestrates meeting creation, vote submission and results.

    Writes for one meeting code are serialized with a per-code lock so that
    concurrent ballots cannot overwrite each other. Reads take no lock and
    see the last stored version.
    """

    def __init__(
        self,
        store: MeetingStoreProtocol,
        slot_generator: SlotGenerator,
        code_generator: CodeGenerator | None = None,
        aggregator: VoteAggregator | None = None,
        clock: Callable[[], DateTime] | None = None,
        max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS,
    ) -> None:
        self._store = store
        self._slot_generator = slot_generator
        self._code_generator = code_generator or CodeGenerator()
        self._aggregator = aggregator or VoteAggregator()
        self._clock = clock or (lambda: pendulum.now(slot_generator.timezone))
        self._max_code_attempts = max_code_attempts

        self._locks: Dict[str, _CodeLock] = {}
        self._locks_guard = threading.Lock()

    @classmethod
    def from_config(cls, config: AppConfig, store: MeetingStoreProtocol) -> "MeetingService":
        """Wire a service from application configuration."""
        return cls(
            store=store,
            slot_generator=SlotGenerator(timezone=config.timezone),
            code_generator=CodeGenerator(length=config.code_length),
            max_code_attempts=config.max_code_attempts,
        )

    @property
    def timezone(self) -> str:
        return self._slot_generator.timezone

    def create_meeting(
        self,
        name: str,
        creator_name: str,
        dates: Iterable[date | str],
        start_time: time | str,
        end_time: time | str,
    ) -> CreateMeetingResult:
        """
        Create a meeting with an empty vote ledger.

        Raises:
            ValidationError: If a field is missing or malformed
            CodeSpaceExhaustedError: If every generated code was taken
        """
        request = validate_input(
            CreateMeetingRequest,
            {
                "name": name,
                "creator_name": creator_name,
                "dates": dates,
                "start_time": start_time,
                "end_time": end_time,
            },
        )

        time_slots = self._slot_generator.generate(
            request.dates,
            request.start_time,
            request.end_time,
        )
        created_at = self._clock()

        for attempt in range(1, self._max_code_attempts + 1):
            code = self._code_generator.next()

            with self._locked(code):
                if self._store.get(code) is not None:
                    logger.debug("Code %s already taken (attempt %d)", code, attempt)
                    continue

                meeting = Meeting(
                    code=code,
                    name=request.name,
                    creator_name=request.creator_name,
                    time_slots=time_slots,
                    created_at=created_at,
                )
                self._store.put(code, meeting)

            logger.info("Created meeting %s with %d slots", code, len(time_slots))
            return CreateMeetingResult(code=code, meeting=meeting)

        logger.error("No free meeting code after %d attempts", self._max_code_attempts)
        raise CodeSpaceExhaustedError(
            f"Could not find a free meeting code after {self._max_code_attempts} attempts"
        )

    def get_meeting(self, code: str) -> Meeting:
        """
        Look up a meeting by code (case-insensitive).

        Raises:
            MeetingNotFoundError: If no meeting has this code
        """
        return self._require(self._normalize_code(code))

    def submit_vote(
        self,
        code: str,
        participant_name: str,
        available_slots: Iterable[str],
    ) -> VoteResult:
        """
        Record a participant's ballot, replacing any earlier one.

        Slots that are not part of the meeting are ignored.

        Raises:
            ValidationError: If the name is blank or the slots are malformed
            MeetingNotFoundError: If no meeting has this code
        """
        request = validate_input(
            VoteRequest,
            {
                "participant_name": participant_name,
                "available_slots": available_slots,
            },
        )
        key = self._normalize_code(code)
        name = request.participant_name
        ballot = list(dict.fromkeys(canonicalize_slot(slot) for slot in request.available_slots))

        with self._locked(key):
            meeting = self._require(key)

            if meeting.find_participant(name) is None:
                meeting.participants.append(Participant(name=name, joined_at=self._clock()))

            meeting.clear_votes_for(name)
            accepted = sum(1 for slot in ballot if meeting.add_vote(slot, name))

            self._store.put(key, meeting)

        logger.info(
            "Recorded vote for %s by %r: %d slots accepted, %d ignored",
            key,
            name,
            accepted,
            len(ballot) - accepted,
        )
        return VoteResult(meeting=meeting, best_slots=self._aggregator.best_slots(meeting))

    def get_results(self, code: str) -> MeetingResults:
        """
        Current tallies for a meeting.

        Raises:
            MeetingNotFoundError: If no meeting has this code
        """
        meeting = self.get_meeting(code)
        return MeetingResults(
            meeting=meeting,
            best_slots=self._aggregator.best_slots(meeting),
            votes_summary=self._aggregator.summary(meeting),
        )

    def list_meetings(self) -> List[Meeting]:
        """All stored meetings, oldest first."""
        meetings = [self._store.get(code) for code in self._store.list_codes()]
        return sorted(
            (meeting for meeting in meetings if meeting is not None),
            key=lambda meeting: meeting.created_at,
        )

    def _require(self, code: str) -> Meeting:
        meeting = self._store.get(code)
        if meeting is None:
            raise MeetingNotFoundError(code)
        return meeting

    @staticmethod
    def _normalize_code(code: str) -> str:
        if not isinstance(code, str) or not code.strip():
            raise ValidationError("code", "must not be empty")
        return code.strip().upper()

    @contextmanager
    def _locked(self, code: str) -> Iterator[None]:
        """
        Hold the lock for one code.

        Registry entries are counted by holders and waiters and removed when
        the last one leaves, so codes that were only probed do not linger.
        """
        with self._locks_guard:
            entry = self._locks.get(code)
            if entry is None:
                entry = self._locks[code] = _CodeLock()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[code]
