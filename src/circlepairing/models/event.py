"""Event value record: one scheduled pairing."""

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
from typing import Any, Dict, Optional, Tuple

from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models.participant import Participant


@dataclass(frozen=True)
class Event:
    """A single pairing of participants.

    The order of ``participants`` is significant: position 0 is the home
    side, position 1 the away side.

    Attributes:
        participants: Ordered participants (at least two)
        round: 1-based round number, or None for an unscheduled event
        leg: Leg number for multi-leg tournaments
        metadata: Free-form event data
    """

    participants: Tuple[Participant, ...]
    round: Optional[int] = None
    leg: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Accept any sequence but store a tuple
        object.__setattr__(self, "participants", tuple(self.participants))
        if len(self.participants) < 2:
            raise InvalidConfigurationException(
                "An event must have at least 2 participants",
                {"participant_count": len(self.participants)},
            )
        if self.round is not None and self.round < 1:
            raise InvalidConfigurationException(
                "Round number must be positive", {"round": self.round}
            )

    @property
    def home(self) -> Participant:
        return self.participants[0]

    @property
    def away(self) -> Participant:
        return self.participants[1]

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def has_participant(self, participant: Participant) -> bool:
        return any(p.id == participant.id for p in self.participants)

    def position_of(self, participant: Participant) -> Optional[int]:
        """Return the 0-based position of a participant, or None if absent."""
        for index, p in enumerate(self.participants):
            if p.id == participant.id:
                return index
        return None

    def pairing_key(self) -> frozenset:
        """Orientation-free key of the participant ids."""
        return frozenset(p.id for p in self.participants)

    def has_metadata(self, key: str) -> bool:
        return key in self.metadata

    def get_metadata_value(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize event to dictionary."""
        return {
            "participants": [p.id for p in self.participants],
            "round": self.round,
            "leg": self.leg,
            "metadata": dict(self.metadata),
        }

    def __str__(self) -> str:
        return " vs ".join(p.label for p in self.participants)
