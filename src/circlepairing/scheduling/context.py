"""Live view of the schedule being generated."""

# Circle Pairing
# Copyright (C) 2025  Circle Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Any, Dict, List, Optional, Sequence, Set

from circlepairing.constants import PARTICIPANTS_PER_EVENT
from circlepairing.models import Event, Participant


class SchedulingContext:
    """Read side-channel over the events accepted so far in one run.

    Ordering strategies and constraints query it for history ("has this pair
    met", "how often was X at home"). Only the owning scheduler appends to it.
    One context belongs to exactly one ``schedule()`` call.
    """

    def __init__(
        self,
        participants: Sequence[Participant],
        events: Optional[Sequence[Event]] = None,
        current_leg: int = 1,
        total_legs: int = 1,
        participants_per_event: int = PARTICIPANTS_PER_EVENT,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.participants: List[Participant] = list(participants)
        self.current_leg = current_leg
        self.total_legs = total_legs
        self.participants_per_event = participants_per_event
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self._events: List[Event] = []
        self._events_by_participant: Dict[str, List[Event]] = {}
        self._played: Set[frozenset] = set()
        for event in events or ():
            self.add_event(event)

    def add_event(self, event: Event) -> None:
        """Record an accepted event so later decisions can see it."""
        self._events.append(event)
        for participant in event.participants:
            self._events_by_participant.setdefault(participant.id, []).append(event)
        self._played.add(event.pairing_key())

    def get_existing_events(self) -> List[Event]:
        return list(self._events)

    def get_event_count(self) -> int:
        return len(self._events)

    def get_events_for_participant(self, participant: Participant) -> List[Event]:
        return list(self._events_by_participant.get(participant.id, ()))

    def get_events_in_round(self, round_number: int) -> List[Event]:
        return [event for event in self._events if event.round == round_number]

    def get_events_for_leg(self, leg: int) -> List[Event]:
        """Events of one leg; single-leg events (leg None) belong to leg 1."""
        if leg < 1 or leg > self.total_legs:
            return []
        return [event for event in self._events if (event.leg or 1) == leg]

    def have_participants_played(self, first: Participant, second: Participant) -> bool:
        if first.id == second.id:
            return False
        return frozenset({first.id, second.id}) in self._played

    def has_event_between(self, participants: Sequence[Participant]) -> bool:
        """True if an event with exactly these participants (any order) exists."""
        if len(participants) != self.participants_per_event:
            return False
        return frozenset(p.id for p in participants) in self._played

    def get_expected_event_count(self) -> int:
        count = len(self.participants)
        if count < self.participants_per_event:
            return 0
        return count * (count - 1) // 2 * self.total_legs

    def is_multi_leg(self) -> bool:
        return self.total_legs > 1

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_metadata_value(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)
