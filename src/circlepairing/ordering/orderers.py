"""Participant ordering strategies (home/away orientation)."""

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

import zlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from circlepairing.constants import (
    ORDERER_ALTERNATING,
    ORDERER_BALANCED,
    ORDERER_SEEDED_RANDOM,
    ORDERER_STATIC,
    SEED_INDEX_FACTOR,
    SEED_ROUND_FACTOR,
)
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Participant

if TYPE_CHECKING:
    from circlepairing.scheduling.context import SchedulingContext


@dataclass(frozen=True)
class EventOrderingContext:
    """Where a candidate event sits in the schedule.

    Attributes:
        round_number: Round the event belongs to (1-based)
        event_index_in_round: Position of the event within its round (0-based)
        leg: Leg number for multi-leg tournaments, None for single-leg
        scheduling_context: Live view of the events accepted so far
    """

    round_number: int
    event_index_in_round: int
    leg: Optional[int]
    scheduling_context: "SchedulingContext"


class ParticipantOrderer(ABC):
    """Decides which participant of a pairing is placed first (home)."""

    name = ""

    @abstractmethod
    def order(
        self, participants: Sequence[Participant], context: EventOrderingContext
    ) -> Tuple[Participant, ...]:
        """Return the participants in their final order without mutating input."""

    def get_name(self) -> str:
        return self.name


class StaticParticipantOrderer(ParticipantOrderer):
    """Keeps the order produced by the pairing algorithm."""

    name = ORDERER_STATIC

    def order(self, participants, context):
        return tuple(participants)


class AlternatingParticipantOrderer(ParticipantOrderer):
    """Reverses every odd-indexed event of a round."""

    name = ORDERER_ALTERNATING

    def order(self, participants, context):
        if context.event_index_in_round % 2 == 1:
            return tuple(reversed(participants))
        return tuple(participants)


class SeededRandomParticipantOrderer(ParticipantOrderer):
    """Pseudo-random orientation that is a pure function of event position.

    The position ``(round, index, leg)`` is folded into one integer and hashed
    with CRC-32; odd hashes reverse the pairing.
    """

    name = ORDERER_SEEDED_RANDOM

    def order(self, participants, context):
        if self.should_reverse(self.create_seed(context)):
            return tuple(reversed(participants))
        return tuple(participants)

    @staticmethod
    def create_seed(context: EventOrderingContext) -> int:
        return (
            context.round_number * SEED_ROUND_FACTOR
            + context.event_index_in_round * SEED_INDEX_FACTOR
            + (context.leg or 0)
        )

    @staticmethod
    def should_reverse(seed: int) -> bool:
        return zlib.crc32(str(seed).encode("ascii")) % 2 == 1


class BalancedParticipantOrderer(ParticipantOrderer):
    """Gives home to the participant with fewer home appearances so far.

    Ties keep the incoming order. Events with more than two participants are
    returned unchanged.
    """

    name = ORDERER_BALANCED

    def order(self, participants, context):
        participants = tuple(participants)
        if len(participants) != 2:
            return participants

        first, second = participants
        first_home = self.get_home_count(first, context)
        second_home = self.get_home_count(second, context)
        if second_home < first_home:
            return (second, first)
        return (first, second)

    @staticmethod
    def get_home_count(participant: Participant, context: EventOrderingContext) -> int:
        events = context.scheduling_context.get_events_for_participant(participant)
        return sum(1 for event in events if event.home.id == participant.id)


_ORDERERS = {
    ORDERER_STATIC: StaticParticipantOrderer,
    ORDERER_ALTERNATING: AlternatingParticipantOrderer,
    ORDERER_SEEDED_RANDOM: SeededRandomParticipantOrderer,
    ORDERER_BALANCED: BalancedParticipantOrderer,
}


def create_participant_orderer(name: str) -> ParticipantOrderer:
    """Build an orderer from its configuration name.

    Raises:
        InvalidConfigurationException: If the name is unknown
    """
    try:
        return _ORDERERS[name]()
    except KeyError:
        raise InvalidConfigurationException(
            f"Unknown participant orderer '{name}'",
            {"orderer": name, "choices": sorted(_ORDERERS)},
        ) from None
