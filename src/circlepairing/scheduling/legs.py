"""Leg strategies: how pairings are oriented in legs after the first."""

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

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from circlepairing.constants import (
    LEG_MIRRORED,
    LEG_REPEATED,
    LEG_SHUFFLED,
    MIN_PARTICIPANTS,
    PARTICIPANTS_PER_EVENT,
)
from circlepairing.constraints import ConstraintSet
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Participant
from circlepairing.type_hints import Pairing


@dataclass(frozen=True)
class ConstraintSatisfiabilityReport:
    """Whether a leg strategy can honour a constraint set.

    Attributes:
        can_satisfy: False when generation is bound to fail
        satisfiable_constraints: Names of constraints the strategy can honour
        unsatisfiable_constraints: Reasons the strategy cannot work
        conflicting_constraints: Names of constraints that clash with the legs
        suggestions: Ways to resolve the problems
        analysis_data: Free-form numbers behind the verdict
    """

    can_satisfy: bool
    satisfiable_constraints: List[str] = field(default_factory=list)
    unsatisfiable_constraints: List[str] = field(default_factory=list)
    conflicting_constraints: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    analysis_data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        satisfiable_constraints: Optional[List[str]] = None,
        analysis_data: Optional[Dict[str, Any]] = None,
    ) -> "ConstraintSatisfiabilityReport":
        return cls(
            True,
            satisfiable_constraints=list(satisfiable_constraints or []),
            analysis_data=dict(analysis_data or {}),
        )

    @classmethod
    def failure(
        cls,
        unsatisfiable_constraints: Optional[List[str]] = None,
        conflicting_constraints: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        analysis_data: Optional[Dict[str, Any]] = None,
    ) -> "ConstraintSatisfiabilityReport":
        return cls(
            False,
            unsatisfiable_constraints=list(unsatisfiable_constraints or []),
            conflicting_constraints=list(conflicting_constraints or []),
            suggestions=list(suggestions or []),
            analysis_data=dict(analysis_data or {}),
        )

    def has_issues(self) -> bool:
        return bool(self.unsatisfiable_constraints or self.conflicting_constraints)

    def get_analysis_value(self, key: str, default: Any = None) -> Any:
        return self.analysis_data.get(key, default)

    def get_summary(self) -> str:
        if self.can_satisfy:
            return "All constraints can be satisfied by this strategy."

        issues = []
        if self.unsatisfiable_constraints:
            issues.append(
                "Unsatisfiable constraints: " + ", ".join(self.unsatisfiable_constraints)
            )
        if self.conflicting_constraints:
            issues.append(
                "Conflicting constraints: " + ", ".join(self.conflicting_constraints)
            )
        return " | ".join(issues)


class LegStrategy(ABC):
    """Derives the orientation of later legs from the first leg.

    ``orient`` receives the final, ordered leg-1 pairing for a fixture slot
    and returns the pairing to play in ``leg``. Leg 1 is always returned
    unchanged.
    """

    name = ""

    @abstractmethod
    def orient(
        self, pairing: Pairing, leg: int, round_in_leg: int, index_in_round: int
    ) -> Pairing:
        """Return the pairing to use for this leg."""

    def get_name(self) -> str:
        return self.name

    def can_satisfy_constraints(
        self,
        participants: Sequence[Participant],
        legs: int,
        participants_per_event: int,
        constraints: ConstraintSet,
    ) -> ConstraintSatisfiabilityReport:
        """Check the structural requirements of the strategy before generation."""
        reasons = []
        if participants_per_event != PARTICIPANTS_PER_EVENT:
            reasons.append(
                f"{self.name.capitalize()} strategy only supports "
                f"{PARTICIPANTS_PER_EVENT} participants per event"
            )
        if len(participants) < MIN_PARTICIPANTS:
            reasons.append(
                f"{self.name.capitalize()} strategy requires at least "
                f"{MIN_PARTICIPANTS} participants"
            )

        data = {"legs": legs, "participant_count": len(participants)}
        if reasons:
            return ConstraintSatisfiabilityReport.failure(reasons, analysis_data=data)
        return ConstraintSatisfiabilityReport.success(constraints.get_names(), data)


class RepeatedLegStrategy(LegStrategy):
    """Every leg repeats the first leg's fixtures unchanged."""

    name = LEG_REPEATED

    def orient(self, pairing, leg, round_in_leg, index_in_round):
        return pairing


class MirroredLegStrategy(LegStrategy):
    """Every leg after the first swaps home and away."""

    name = LEG_MIRRORED

    def orient(self, pairing, leg, round_in_leg, index_in_round):
        if leg > 1:
            return (pairing[1], pairing[0])
        return pairing


class ShuffledLegStrategy(LegStrategy):
    """Legs after the first swap sides at random, one draw per fixture.

    Each draw is seeded from ``(seed, leg, round, index)`` so the same seed
    always gives the same orientation, whatever order fixtures are visited in.
    """

    name = LEG_SHUFFLED

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed if seed is not None else random.randrange(2**32)

    def orient(self, pairing, leg, round_in_leg, index_in_round):
        if leg == 1:
            return pairing
        rng = random.Random(f"{self.seed}:{leg}:{round_in_leg}:{index_in_round}")
        if rng.random() < 0.5:
            return (pairing[1], pairing[0])
        return pairing


def create_leg_strategy(name: str, seed: Optional[int] = None) -> LegStrategy:
    """Build a leg strategy from its configuration name.

    Raises:
        InvalidConfigurationException: If the name is unknown
    """
    if name == LEG_REPEATED:
        return RepeatedLegStrategy()
    if name == LEG_MIRRORED:
        return MirroredLegStrategy()
    if name == LEG_SHUFFLED:
        return ShuffledLegStrategy(seed)
    raise InvalidConfigurationException(
        f"Unknown leg strategy '{name}'",
        {"leg_strategy": name, "choices": [LEG_REPEATED, LEG_MIRRORED, LEG_SHUFFLED]},
    )
