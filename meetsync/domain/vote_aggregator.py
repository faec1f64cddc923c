"""
Vote tallying and best-slot ranking.

This is the only place that turns a meeting's ledger into counts, so every
caller (service, CLI, tests) sees the same numbers.
"""

from typing import List

from .models import BestSlot, Meeting, VoteSummary


def percentage(count: int, total: int) -> int:
    """
    Share of ``total`` as a whole percent, rounding halves up.

    Integer arithmetic keeps 0.5 cases exact (1 of 8 -> 13, not 12).
    """
    if total <= 0:
        return 0
    return (200 * count + total) // (2 * total)


class VoteAggregator:
    """Computes per-slot tallies for a meeting. Read-only."""

    def best_slots(self, meeting: Meeting) -> List[BestSlot]:
        """
        Return every slot tied for the highest vote count.

        Nobody has voted -> empty list. A slot with zero votes is never
        best, even if all slots have zero votes. Ties come back in ledger
        (chronological) order.
        """
        total = meeting.participant_count
        if total == 0:
            return []

        counts = [(slot, len(meeting.votes[slot])) for slot in meeting.time_slots]
        if not counts:
            return []

        max_votes = max(count for _, count in counts)
        if max_votes == 0:
            return []

        return [
            BestSlot(slot=slot, votes=count, percentage=percentage(count, total))
            for slot, count in counts
            if count == max_votes
        ]

    def summary(self, meeting: Meeting) -> List[VoteSummary]:
        """
        Tally every slot, including slots nobody picked.

        Sorted by vote count descending. Equal counts keep ledger order.
        """
        tallies = [
            VoteSummary(
                slot=slot,
                votes=len(meeting.votes[slot]),
                voters=list(meeting.votes[slot])
            )
            for slot in meeting.time_slots
        ]
        return sorted(tallies, key=lambda tally: tally.votes, reverse=True)
