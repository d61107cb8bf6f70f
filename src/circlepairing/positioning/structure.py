"""Schedules expressed in positions rather than participants."""

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
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from circlepairing.constants import META_FULLY_RESOLVED
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Event, Participant, Schedule
from circlepairing.ordering import EventOrderingContext, ParticipantOrderer
from circlepairing.positioning.positions import Position, PositionResolver

if TYPE_CHECKING:
    from circlepairing.scheduling.context import SchedulingContext


@dataclass(frozen=True)
class PositionalPairing:
    """Two positions that meet, position 1 listed first."""

    position1: Position
    position2: Position

    def resolve(
        self, resolver: PositionResolver
    ) -> Optional[Tuple[Participant, Participant]]:
        first = resolver.resolve(self.position1)
        second = resolver.resolve(self.position2)
        if first is None or second is None:
            return None
        return first, second

    def can_resolve(self, resolver: PositionResolver) -> bool:
        return resolver.can_resolve(self.position1) and resolver.can_resolve(
            self.position2
        )

    def is_statically_resolvable(self) -> bool:
        return (
            self.position1.is_statically_resolvable()
            and self.position2.is_statically_resolvable()
        )

    def __str__(self) -> str:
        return f"{self.position1} vs {self.position2}"


@dataclass(frozen=True)
class PositionalRound:
    """The positional pairings of one round."""

    round_number: int
    pairings: Tuple[PositionalPairing, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "pairings", tuple(self.pairings))
        if self.round_number < 1:
            raise InvalidConfigurationException(
                "Round number must be at least 1", {"round": self.round_number}
            )

    def get_pairing_count(self) -> int:
        return len(self.pairings)

    def resolve(
        self,
        resolver: PositionResolver,
        orderer: Optional[ParticipantOrderer] = None,
        context: Optional["SchedulingContext"] = None,
        leg: Optional[int] = None,
    ) -> List[Event]:
        """Turn this round into events.

        Pairings the resolver cannot fill are skipped. The orderer is only
        applied when a scheduling context is given; otherwise position 1
        stays home.
        """
        events = []
        for index, pairing in enumerate(self.pairings):
            participants = pairing.resolve(resolver)
            if participants is None:
                continue
            if orderer is not None and context is not None:
                participants = orderer.order(
                    participants,
                    EventOrderingContext(self.round_number, index, leg, context),
                )
            events.append(Event(participants, round=self.round_number, leg=leg))
        return events

    def can_fully_resolve(self, resolver: PositionResolver) -> bool:
        return all(pairing.can_resolve(resolver) for pairing in self.pairings)


@dataclass(frozen=True)
class PositionalSchedule:
    """A full schedule skeleton of positional rounds plus metadata."""

    rounds: Tuple[PositionalRound, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "rounds", tuple(self.rounds))

    def get_round(self, round_number: int) -> Optional[PositionalRound]:
        for positional_round in self.rounds:
            if positional_round.round_number == round_number:
                return positional_round
        return None

    def get_round_count(self) -> int:
        return len(self.rounds)

    def get_total_pairing_count(self) -> int:
        return sum(r.get_pairing_count() for r in self.rounds)

    def get_metadata_value(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def resolve(self, resolver: PositionResolver) -> Schedule:
        """Resolve every round and return the resulting schedule."""
        events: List[Event] = []
        for positional_round in self.rounds:
            events.extend(positional_round.resolve(resolver))
        metadata = dict(self.metadata)
        metadata[META_FULLY_RESOLVED] = True
        return Schedule(events, metadata)

    def can_fully_resolve(self, resolver: PositionResolver) -> bool:
        return all(r.can_fully_resolve(resolver) for r in self.rounds)

    def is_fully_predetermined(self) -> bool:
        """True when every position is a seed, as in a round robin."""
        return all(
            pairing.is_statically_resolvable()
            for positional_round in self.rounds
            for pairing in positional_round.pairings
        )
