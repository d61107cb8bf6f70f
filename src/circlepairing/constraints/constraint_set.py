"""Ordered, immutable constraint collections and their builder."""

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

from typing import TYPE_CHECKING, Iterable, Iterator, List, Tuple

from circlepairing.constraints.base import (
    CallableConstraint,
    ConstraintInterface,
    ConstraintPredicate,
)
from circlepairing.constraints.pairing import (
    MinimumRestPeriodsConstraint,
    NoRepeatPairings,
    SeedProtectionConstraint,
)
from circlepairing.constraints.roles import ConsecutiveRoleConstraint
from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Event

if TYPE_CHECKING:
    from circlepairing.scheduling.context import SchedulingContext


class ConstraintSet:
    """An immutable, ordered collection of constraints.

    Build one with ``ConstraintSet.create()...build()`` or pass constraints
    directly.
    """

    def __init__(self, constraints: Iterable[ConstraintInterface] = ()):
        self._constraints: Tuple[ConstraintInterface, ...] = tuple(constraints)
        for constraint in self._constraints:
            if not isinstance(constraint, ConstraintInterface):
                raise InvalidConfigurationException(
                    "Constraint set members must implement ConstraintInterface",
                    {"member": type(constraint).__name__},
                )

    @staticmethod
    def create() -> "ConstraintSetBuilder":
        return ConstraintSetBuilder()

    def is_satisfied(self, event: Event, context: "SchedulingContext") -> bool:
        """True when every constraint accepts; stops at the first rejection."""
        return all(c.is_satisfied(event, context) for c in self._constraints)

    def get_failing_constraints(
        self, event: Event, context: "SchedulingContext"
    ) -> List[ConstraintInterface]:
        """Every constraint rejecting ``event``, in set order."""
        return [c for c in self._constraints if not c.is_satisfied(event, context)]

    def get_constraints(self) -> Tuple[ConstraintInterface, ...]:
        return self._constraints

    def get_names(self) -> List[str]:
        return [c.get_name() for c in self._constraints]

    def is_empty(self) -> bool:
        return not self._constraints

    def __len__(self) -> int:
        return len(self._constraints)

    def __iter__(self) -> Iterator[ConstraintInterface]:
        return iter(self._constraints)

    def __repr__(self) -> str:
        return f"ConstraintSet({self.get_names()!r})"


class ConstraintSetBuilder:
    """Fluent builder that accumulates constraints in insertion order."""

    def __init__(self):
        self._constraints: List[ConstraintInterface] = []

    def add(self, constraint: ConstraintInterface) -> "ConstraintSetBuilder":
        self._constraints.append(constraint)
        return self

    def no_repeat_pairings(self) -> "ConstraintSetBuilder":
        return self.add(NoRepeatPairings())

    def minimum_rest_periods(self, min_rounds: int) -> "ConstraintSetBuilder":
        return self.add(MinimumRestPeriodsConstraint(min_rounds))

    def seed_protection(
        self, top_seeds: int, protection_period: float
    ) -> "ConstraintSetBuilder":
        return self.add(SeedProtectionConstraint(top_seeds, protection_period))

    def consecutive_home_away(self, max_consecutive: int) -> "ConstraintSetBuilder":
        return self.add(ConsecutiveRoleConstraint.home_away(max_consecutive))

    def custom(
        self, predicate: ConstraintPredicate, name: str = "Custom Constraint"
    ) -> "ConstraintSetBuilder":
        return self.add(CallableConstraint(predicate, name))

    def build(self) -> ConstraintSet:
        return ConstraintSet(self._constraints)
