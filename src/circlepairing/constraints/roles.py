"""Constraints on how often a participant repeats the same role."""

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

from typing import Any, Callable, List, Optional

from circlepairing.constants import ROLE_AWAY, ROLE_HOME
from circlepairing.constraints.base import ConstraintInterface
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Event, Participant

RoleExtractor = Callable[[Event, Participant], Any]


def _home_away_role(event: Event, participant: Participant) -> str:
    return ROLE_HOME if event.position_of(participant) == 0 else ROLE_AWAY


def _position_role(event: Event, participant: Participant) -> Optional[int]:
    return event.position_of(participant)


class ConsecutiveRoleConstraint(ConstraintInterface):
    """Limits runs of the same role (home, away, position) per participant.

    The candidate is appended to each participant's history, the history is
    sorted by round and the longest run of equal roles must not exceed
    ``max_consecutive``.
    """

    def __init__(
        self,
        max_consecutive: int,
        role_extractor: RoleExtractor,
        name: str = "Consecutive Role Constraint",
    ):
        if max_consecutive < 1:
            raise InvalidConfigurationException(
                "Max consecutive must be at least 1",
                {"max_consecutive": max_consecutive},
            )
        if not callable(role_extractor):
            raise InvalidConfigurationException(
                "Role extractor must be callable", {"name": name}
            )
        self.max_consecutive = max_consecutive
        self._role_extractor = role_extractor
        self._name = name

    @classmethod
    def home_away(cls, max_consecutive: int) -> "ConsecutiveRoleConstraint":
        return cls(
            max_consecutive,
            _home_away_role,
            f"Home/Away consecutive limit ({max_consecutive})",
        )

    @classmethod
    def position(cls, max_consecutive: int) -> "ConsecutiveRoleConstraint":
        return cls(
            max_consecutive,
            _position_role,
            f"Position consecutive limit ({max_consecutive})",
        )

    def is_satisfied(self, event, context):
        for participant in event.participants:
            history = context.get_events_for_participant(participant) + [event]
            # sorted() is stable, so same-round events keep acceptance order
            history = sorted(history, key=lambda e: e.round or 0)
            roles = [self._role_extractor(e, participant) for e in history]
            if self._longest_run(roles) > self.max_consecutive:
                return False
        return True

    def get_name(self):
        return self._name

    @staticmethod
    def _longest_run(roles: List[Any]) -> int:
        longest = 0
        current = 0
        previous = object()
        for role in roles:
            current = current + 1 if role == previous else 1
            previous = role
            longest = max(longest, current)
        return longest
