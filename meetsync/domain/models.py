"""
Domain models for meetings, participants and vote tallies.

Slots are carried around as canonical ISO-8601 instant strings
(``2025-09-25T16:00:00.000Z``). The vote ledger is keyed by exact string
equality, so every slot must go through ``format_slot`` before it is stored
or looked up.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

SLOT_FORMAT = "YYYY-MM-DD[T]HH:mm:ss.SSS[Z]"
DISPLAY_FORMAT = "ddd DD.MM.YYYY HH:mm"


def format_slot(moment: DateTime) -> str:
    """Format an instant as a canonical slot identifier (UTC, milliseconds)."""
    return moment.in_timezone("UTC").format(SLOT_FORMAT)


def parse_instant(value: str) -> DateTime:
    """
    Parse an ISO-8601 string into an aware DateTime.

    Raises:
        ValueError: If the value is not a date-time string
    """
    parsed = pendulum.parse(value)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Not an ISO-8601 instant: {value!r}")
    return parsed


def canonicalize_slot(value: str) -> str:
    """
    Rewrite an instant string in canonical slot form.

    Strings that do not parse, or that name an instant outside the
    representable range, are returned unchanged; they simply won't match
    any ledger entry.
    """
    try:
        return format_slot(parse_instant(value))
    except (ValueError, OverflowError):
        return value


def format_slot_local(slot: str, timezone: str) -> str:
    """Render a slot identifier as wall-clock time in the given timezone."""
    return parse_instant(slot).in_timezone(timezone).format(DISPLAY_FORMAT)


@dataclass
class Participant:
    """A voter within one meeting, identified by exact name."""
    name: str
    joined_at: DateTime

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "joinedAt": self.joined_at.isoformat()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        return cls(name=data["name"], joined_at=parse_instant(data["joinedAt"]))


@dataclass
class Meeting:
    """
    One scheduling event and its vote ledger.

    Invariant: ``votes`` has exactly one entry per slot in ``time_slots``
    and nothing else. Each entry lists the names of participants who marked
    that slot available, in the order their votes were recorded.
    """
    code: str
    name: str
    creator_name: str
    time_slots: List[str]
    created_at: DateTime
    participants: List[Participant] = field(default_factory=list)
    votes: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.votes:
            self.votes = {slot: [] for slot in self.time_slots}

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def find_participant(self, name: str) -> Participant | None:
        """Find a participant by exact (case-sensitive) name."""
        for participant in self.participants:
            if participant.name == name:
                return participant
        return None

    def clear_votes_for(self, name: str) -> None:
        """Remove a participant's name from every slot in the ledger."""
        for slot, voters in self.votes.items():
            self.votes[slot] = [voter for voter in voters if voter != name]

    def add_vote(self, slot: str, name: str) -> bool:
        """
        Record a vote for an existing slot.

        Returns False (and leaves the ledger untouched) when the slot is not
        part of this meeting.
        """
        voters = self.votes.get(slot)
        if voters is None:
            return False
        if name not in voters:
            voters.append(name)
        return True

    def copy(self) -> "Meeting":
        """Return an independent deep copy."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted/wire layout."""
        return {
            "id": self.code,
            "name": self.name,
            "creatorName": self.creator_name,
            "timeSlots": list(self.time_slots),
            "participants": [p.to_dict() for p in self.participants],
            "votes": {slot: list(self.votes[slot]) for slot in self.time_slots},
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Meeting":
        """
        Rebuild a meeting from its persisted layout.

        Ledger entries for slots outside ``timeSlots`` are discarded and
        missing entries are restored as empty, so the ledger invariant holds
        even for hand-edited records.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a timestamp does not parse
        """
        time_slots = list(data["timeSlots"])
        stored_votes = data.get("votes") or {}
        return cls(
            code=data["id"],
            name=data["name"],
            creator_name=data["creatorName"],
            time_slots=time_slots,
            created_at=parse_instant(data["createdAt"]),
            participants=[
                Participant.from_dict(item) for item in data.get("participants", [])
            ],
            votes={slot: list(stored_votes.get(slot, [])) for slot in time_slots},
        )


@dataclass(frozen=True)
class BestSlot:
    """A slot with the highest nonzero vote count."""
    slot: str
    votes: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return {"slot": self.slot, "votes": self.votes, "percentage": self.percentage}


@dataclass(frozen=True)
class VoteSummary:
    """Vote tally for one slot."""
    slot: str
    votes: int
    voters: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"slot": self.slot, "votes": self.votes, "voters": list(self.voters)}
