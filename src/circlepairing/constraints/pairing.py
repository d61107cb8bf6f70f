"""Constraints on who may meet whom, and when."""

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

from itertools import combinations
from typing import List, Optional, Sequence

from circlepairing.constants import META_TOTAL_ROUNDS
from circlepairing.constraints.base import ConstraintInterface
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Participant


class NoRepeatPairings(ConstraintInterface):
    """Rejects any pairing that has already been scheduled."""

    def is_satisfied(self, event, context):
        for first, second in combinations(event.participants, 2):
            if context.have_participants_played(first, second):
                return False
        return True

    def get_name(self):
        return "No Repeat Pairings"


class MinimumRestPeriodsConstraint(ConstraintInterface):
    """Requires at least ``min_rounds`` rounds between two meetings of a pair."""

    def __init__(self, min_rounds: int):
        if min_rounds < 1:
            raise InvalidConfigurationException(
                "Minimum rest periods must be at least 1", {"min_rounds": min_rounds}
            )
        self.min_rounds = min_rounds

    def is_satisfied(self, event, context):
        current_round = event.round or 0
        for first, second in combinations(event.participants, 2):
            last = self._last_meeting_round(first, second, context)
            if last is not None and current_round - last < self.min_rounds:
                return False
        return True

    def get_name(self):
        return f"Minimum Rest Periods ({self.min_rounds} rounds)"

    @staticmethod
    def _last_meeting_round(
        first: Participant, second: Participant, context
    ) -> Optional[int]:
        rounds = [
            event.round
            for event in context.get_events_for_participant(first)
            if event.round is not None and event.has_participant(second)
        ]
        return max(rounds) if rounds else None


class SeedProtectionConstraint(ConstraintInterface):
    """Keeps top seeds apart during the opening part of the schedule.

    For the first ``int(total_rounds * protection_period)`` rounds no event
    may contain more than one of the ``top_seeds`` best seeded participants.
    ``total_rounds`` is read from the context metadata, falling back to a
    single-leg estimate.
    """

    def __init__(self, top_seeds: int, protection_period: float):
        if top_seeds < 1:
            raise InvalidConfigurationException(
                "Must protect at least 1 seed", {"top_seeds": top_seeds}
            )
        if not 0.0 <= protection_period <= 1.0:
            raise InvalidConfigurationException(
                "Protection period must be between 0.0 and 1.0",
                {"protection_period": protection_period},
            )
        self.top_seeds = top_seeds
        self.protection_period = protection_period

    def is_satisfied(self, event, context):
        total_rounds = context.get_metadata_value(
            META_TOTAL_ROUNDS, max(len(context.participants) - 1, 1)
        )
        protected_until = int(total_rounds * self.protection_period)
        if (event.round or 0) > protected_until:
            return True

        top_ids = {p.id for p in self.get_top_seeds(context.participants)}
        seeded_in_event = [p for p in event.participants if p.id in top_ids]
        return len(seeded_in_event) <= 1

    def get_name(self):
        return (
            f"Seed Protection (top {self.top_seeds}, "
            f"{self.protection_period * 100:.0f}% period)"
        )

    def get_top_seeds(self, participants: Sequence[Participant]) -> List[Participant]:
        seeded = sorted(
            (p for p in participants if p.seed is not None), key=lambda p: p.seed
        )
        return seeded[: self.top_seeds]
