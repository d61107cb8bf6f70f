"""Abstract positions and the resolvers that map them to participants."""

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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Participant


class PositionType(Enum):
    """How a position is looked up."""

    SEED = "seed"
    STANDING = "standing"
    STANDING_AFTER_ROUND = "standing_after_round"


@dataclass(frozen=True)
class Position:
    """A slot in a schedule that is filled by a participant later.

    Attributes:
        type: Lookup kind
        value: 1-based seed or standing number
        round_context: Round after which the standing is taken, required for
            ``STANDING_AFTER_ROUND``
    """

    type: PositionType
    value: int
    round_context: Optional[int] = None

    def __post_init__(self):
        if self.value < 1:
            raise InvalidConfigurationException(
                "Position value must be at least 1", {"value": self.value}
            )
        if self.type is PositionType.STANDING_AFTER_ROUND and self.round_context is None:
            raise InvalidConfigurationException(
                "Round context required for STANDING_AFTER_ROUND position type"
            )

    @classmethod
    def seed(cls, value: int) -> "Position":
        return cls(PositionType.SEED, value)

    def is_statically_resolvable(self) -> bool:
        """Seed positions are known before any event is played."""
        return self.type is PositionType.SEED

    def __str__(self) -> str:
        if self.type is PositionType.SEED:
            return f"Seed {self.value}"
        if self.type is PositionType.STANDING:
            return f"Standing {self.value}"
        return f"Standing {self.value} (after round {self.round_context})"


class PositionResolver(ABC):
    """Maps positions to participants."""

    @abstractmethod
    def resolve(self, position: Position) -> Optional[Participant]:
        """Return the participant at ``position``, or None if unknown."""
        pass

    @abstractmethod
    def can_resolve(self, position: Position) -> bool:
        pass


class SeedBasedPositionResolver(PositionResolver):
    """Resolves seed positions by index into the given participant order.

    Seed 1 is the first participant. Standing positions are never resolved.
    """

    def __init__(self, participants: Sequence[Participant]):
        self.participants: List[Participant] = list(participants)

    def resolve(self, position: Position) -> Optional[Participant]:
        if not self.can_resolve(position):
            return None
        return self.participants[position.value - 1]

    def can_resolve(self, position: Position) -> bool:
        return (
            position.type is PositionType.SEED
            and position.value <= len(self.participants)
        )
