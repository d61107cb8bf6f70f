"""Closed-form expected event counts per scheduling algorithm."""

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
from typing import Any, Dict, Optional, Sequence

from circlepairing.constants import ALGORITHM_ROUND_ROBIN_NAME, MIN_PARTICIPANTS
from circlepairing.models import Participant


class ExpectedEventCalculator(ABC):
    """Computes how many events a complete schedule must contain."""

    @abstractmethod
    def calculate_expected_events(
        self,
        participants: Sequence[Participant],
        legs: int = 1,
        algorithm_params: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Expected event count for a complete schedule."""

    @abstractmethod
    def get_algorithm_name(self) -> str:
        """Algorithm name shown in diagnostics."""


class RoundRobinEventCalculator(ExpectedEventCalculator):
    """Every participant meets every other participant once per leg."""

    def calculate_expected_events(self, participants, legs=1, algorithm_params=None):
        count = len(participants)
        if count < MIN_PARTICIPANTS:
            return 0
        return count * (count - 1) // 2 * legs

    def get_algorithm_name(self):
        return ALGORITHM_ROUND_ROBIN_NAME

    def get_description(self) -> str:
        return (
            "Each participant plays every other participant exactly once per leg. "
            "Formula: n*(n-1)/2 * legs"
        )
