"""Constraint violation records and the per-run collector."""

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

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from circlepairing.constraints import ConstraintInterface
from circlepairing.models import Event, Participant


@dataclass(frozen=True)
class ConstraintViolation:
    """One candidate event rejected by one constraint.

    Attributes:
        constraint: The constraint that rejected the event
        rejected_event: The candidate event that was dropped
        reason: Human-readable reason
        affected_participants: Participants who lost the pairing
        round_number: Round the candidate belonged to
    """

    constraint: ConstraintInterface
    rejected_event: Event
    reason: str
    affected_participants: Tuple[Participant, ...]
    round_number: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(
            self, "affected_participants", tuple(self.affected_participants)
        )

    @property
    def constraint_name(self) -> str:
        return self.constraint.get_name()

    def get_description(self) -> str:
        where = f" in round {self.round_number}" if self.round_number else ""
        labels = ", ".join(p.label for p in self.affected_participants)
        return (
            f"Constraint '{self.constraint_name}' violated{where}: "
            f"{self.reason} (Participants: {labels})"
        )


class ConstraintViolationCollector:
    """Accumulates violations for a single scheduling run."""

    def __init__(self):
        self._violations: List[ConstraintViolation] = []

    def record_violation(self, violation: ConstraintViolation) -> None:
        self._violations.append(violation)

    def clear(self) -> None:
        self._violations = []

    def get_violations(self) -> List[ConstraintViolation]:
        return list(self._violations)

    def get_violations_by_constraint(self) -> Dict[str, List[ConstraintViolation]]:
        """Violations grouped by constraint name, in first-seen order."""
        grouped: Dict[str, List[ConstraintViolation]] = {}
        for violation in self._violations:
            grouped.setdefault(violation.constraint_name, []).append(violation)
        return grouped

    def get_violations_by_participant(self) -> Dict[str, List[ConstraintViolation]]:
        """Violations grouped by affected participant id, in first-seen order."""
        grouped: Dict[str, List[ConstraintViolation]] = {}
        for violation in self._violations:
            for participant in violation.affected_participants:
                grouped.setdefault(participant.id, []).append(violation)
        return grouped

    def has_violations(self) -> bool:
        return bool(self._violations)

    def get_violation_count(self) -> int:
        return len(self._violations)

    def __len__(self) -> int:
        return len(self._violations)

    def get_violation_counts_by_constraint(self) -> Dict[str, int]:
        return {
            name: len(violations)
            for name, violations in self.get_violations_by_constraint().items()
        }

    def get_affected_rounds(self) -> List[int]:
        return sorted(
            {v.round_number for v in self._violations if v.round_number is not None}
        )
