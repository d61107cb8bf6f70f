"""Schedule value record."""

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

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from circlepairing.models.event import Event
from circlepairing.models.participant import Participant


@dataclass(frozen=True)
class Schedule:
    """An ordered, immutable collection of events plus metadata.

    Events keep the order in which the scheduler accepted them, which is
    also the iteration order.

    Attributes:
        events: Events in acceptance order
        metadata: Schedule-level data (algorithm, participant_count, ...)
    """

    events: Tuple[Event, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "events", tuple(self.events))

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)

    def __getitem__(self, index: int) -> Event:
        return self.events[index]

    def add_event(self, event: Event) -> "Schedule":
        """Return a new schedule with ``event`` appended."""
        return Schedule(self.events + (event,), dict(self.metadata))

    def with_metadata(self, **metadata: Any) -> "Schedule":
        """Return a new schedule with extra metadata merged in."""
        merged = dict(self.metadata)
        merged.update(metadata)
        return Schedule(self.events, merged)

    def is_empty(self) -> bool:
        return not self.events

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_metadata_value(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def get_events_for_round(self, round_number: int) -> List[Event]:
        return [event for event in self.events if event.round == round_number]

    def get_events_for_participant(self, participant: Participant) -> List[Event]:
        return [event for event in self.events if event.has_participant(participant)]

    def get_rounds(self) -> List[int]:
        """Sorted, distinct round numbers present in the schedule."""
        return sorted({event.round for event in self.events if event.round is not None})

    def get_max_round(self) -> Optional[int]:
        """Highest round number, or None when no event carries a round."""
        rounds = [event.round for event in self.events if event.round is not None]
        return max(rounds) if rounds else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize schedule to dictionary."""
        return {
            "metadata": dict(self.metadata),
            "events": [event.to_dict() for event in self.events],
        }
