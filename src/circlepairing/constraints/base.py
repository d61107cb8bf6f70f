"""Constraint abstraction and the callable adapter."""

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
from typing import TYPE_CHECKING, Callable

from circlepairing.exceptions import InvalidConfigurationException
from circlepairing.models import Event

if TYPE_CHECKING:
    from circlepairing.scheduling.context import SchedulingContext

ConstraintPredicate = Callable[[Event, "SchedulingContext"], bool]


class ConstraintInterface(ABC):
    """A pure predicate over a candidate event and the schedule so far.

    Returning False rejects the candidate; it is not an error. Constraints
    must not mutate the event or the context.
    """

    @abstractmethod
    def is_satisfied(self, event: Event, context: "SchedulingContext") -> bool:
        """Check whether ``event`` may be added to the schedule."""

    @abstractmethod
    def get_name(self) -> str:
        """Stable name used in diagnostics and suggestions."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_name()!r})"


class CallableConstraint(ConstraintInterface):
    """Wraps a plain ``predicate(event, context) -> bool``."""

    def __init__(self, predicate: ConstraintPredicate, name: str = "Custom Constraint"):
        if not callable(predicate):
            raise InvalidConfigurationException(
                "Constraint predicate must be callable", {"name": name}
            )
        self._predicate = predicate
        self._name = name

    def is_satisfied(self, event, context):
        return bool(self._predicate(event, context))

    def get_name(self):
        return self._name
