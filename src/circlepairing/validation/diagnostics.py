"""Scheduling diagnostics: missing pairings and pre-generation conflict checks."""

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
from itertools import combinations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from circlepairing.constraints import (
    ConstraintInterface,
    ConstraintSet,
    MinimumRestPeriodsConstraint,
    NoRepeatPairings,
    SeedProtectionConstraint,
)
from circlepairing.models import Event, Participant
from circlepairing.utils import setup_logger
from circlepairing.validation.violations import ConstraintViolationCollector

logger = setup_logger(__name__)

MISSING_PAIRINGS_SHOWN = 10


def rounds_per_leg(participant_count: int) -> int:
    """Rounds in one leg of the circle method (a bye seat is added for odd counts)."""
    if participant_count < 2:
        return 0
    return participant_count if participant_count % 2 else participant_count - 1


@dataclass(frozen=True)
class DiagnosticReport:
    """Snapshot of a failed or partial scheduling run.

    Attributes:
        participant_count: Number of participants
        expected_events: Events a complete schedule would hold
        generated_events: Events actually generated
        missing_events: Difference between the two
        missing_pairings: "A vs B (Leg n)" lines for meetings that never happened
        constraint_violations: Descriptions of recorded violations
        impossible_pairings: Pairings no schedule could ever contain
        suggestions: Actionable advice
        analysis_context: Free-form extra data
    """

    participant_count: int
    expected_events: int
    generated_events: int
    missing_events: int
    missing_pairings: List[str] = field(default_factory=list)
    constraint_violations: List[str] = field(default_factory=list)
    impossible_pairings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    analysis_context: Dict[str, Any] = field(default_factory=dict)

    def get_context_value(self, key: str, default: Any = None) -> Any:
        return self.analysis_context.get(key, default)

    def get_completion_percentage(self) -> float:
        if self.expected_events == 0:
            return 0.0
        return self.generated_events / self.expected_events * 100.0

    def is_successful(self) -> bool:
        return self.missing_events == 0 and not self.constraint_violations

    def has_critical_issues(self) -> bool:
        return (
            bool(self.impossible_pairings)
            or bool(self.constraint_violations)
            or self.missing_events > self.expected_events / 2
        )

    def get_summary(self) -> str:
        if self.is_successful():
            return "Schedule generation completed successfully."

        parts = [
            f"Schedule generation failed at {int(self.get_completion_percentage())}% completion."
        ]
        if self.missing_events > 0:
            parts.append(f"{self.missing_events} events could not be generated.")
        if self.constraint_violations:
            parts.append(
                f"{len(self.constraint_violations)} constraint violations detected."
            )
        if self.impossible_pairings:
            parts.append(
                f"{len(self.impossible_pairings)} impossible pairings identified."
            )
        return " ".join(parts)

    def to_string(self) -> str:
        lines = [
            "=== SCHEDULING DIAGNOSTIC REPORT ===",
            "",
            "Tournament Configuration:",
            f"  Participants: {self.participant_count}",
            f"  Expected Events: {self.expected_events}",
            f"  Generated Events: {self.generated_events}",
            f"  Missing Events: {self.missing_events}",
            f"  Completion: {self.get_completion_percentage():.1f}%",
            "",
        ]

        if self.missing_pairings:
            lines.append("Missing Pairings:")
            for pairing in self.missing_pairings[:MISSING_PAIRINGS_SHOWN]:
                lines.append(f"  - {pairing}")
            remaining = len(self.missing_pairings) - MISSING_PAIRINGS_SHOWN
            if remaining > 0:
                lines.append(f"  ... and {remaining} more")
            lines.append("")

        for title, entries in (
            ("Constraint Violations:", self.constraint_violations),
            ("Impossible Pairings:", self.impossible_pairings),
            ("Suggestions:", self.suggestions),
        ):
            if entries:
                lines.append(title)
                lines.extend(f"  - {entry}" for entry in entries)
                lines.append("")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_string()


class SchedulingDiagnostics:
    """Explains scheduling failures and spots impossible set-ups up front."""

    def analyze_scheduling_failure(
        self,
        participants: Sequence[Participant],
        constraints: ConstraintSet,
        partial_events: Sequence[Event],
        legs: int,
        violations: Optional[ConstraintViolationCollector] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> DiagnosticReport:
        """Build a report for a run that produced ``partial_events``.

        Args:
            participants: Participants that were scheduled
            constraints: Constraint set used for the run
            partial_events: Events that were generated
            legs: Number of legs
            violations: Violations recorded during the run, if any
            context: Extra data to carry in the report

        Returns:
            The diagnostic report
        """
        count = len(participants)
        expected = self._expected_events(count, legs)
        generated = len(partial_events)
        recorded = violations.get_violations() if violations is not None else []

        report = DiagnosticReport(
            participant_count=count,
            expected_events=expected,
            generated_events=generated,
            missing_events=expected - generated,
            missing_pairings=self.identify_missing_pairings(
                participants, partial_events, legs
            ),
            constraint_violations=[v.get_description() for v in recorded],
            impossible_pairings=self.identify_impossible_pairings(
                participants, constraints, legs
            ),
            suggestions=self._suggestions(count, generated, expected, legs),
            analysis_context=dict(context or {}),
        )
        logger.debug("Diagnostics: %s", report.get_summary())
        return report

    def identify_missing_pairings(
        self, participants: Sequence[Participant], events: Sequence[Event], legs: int
    ) -> List[str]:
        """List every (pair, leg) meeting that no event covers.

        Events without a leg count towards leg 1.
        """
        played = set()
        for event in events:
            played.add((event.pairing_key(), event.leg or 1))

        missing = []
        for first, second in combinations(participants, 2):
            key = frozenset({first.id, second.id})
            for leg in range(1, legs + 1):
                if (key, leg) not in played:
                    missing.append(f"{first.label} vs {second.label} (Leg {leg})")
        return missing

    def identify_impossible_pairings(
        self, participants: Sequence[Participant], constraints: ConstraintSet, legs: int
    ) -> List[str]:
        """Pairings that seed protection keeps apart for the whole schedule."""
        total_rounds = rounds_per_leg(len(participants)) * legs
        impossible = []
        for constraint in constraints:
            if not isinstance(constraint, SeedProtectionConstraint):
                continue
            if int(total_rounds * constraint.protection_period) < total_rounds:
                continue
            top = constraint.get_top_seeds(participants)
            for first, second in combinations(top, 2):
                impossible.append(f"{first.label} vs {second.label}")
        return impossible

    def identify_constraint_conflicts(
        self, participants: Sequence[Participant], constraints: ConstraintSet, legs: int
    ) -> List[str]:
        """Describe problems that make a complete schedule impossible.

        Returns:
            One line per conflict, empty when none is found
        """
        conflicts = []
        if self._expected_events(len(participants), legs) == 0:
            conflicts.append("Insufficient participants for tournament generation")
        conflicts.extend(
            message for _, message in self._analyze_constraints(participants, constraints, legs)
        )
        return conflicts

    def find_conflicting_constraints(
        self, participants: Sequence[Participant], constraints: ConstraintSet, legs: int
    ) -> List[ConstraintInterface]:
        found: List[ConstraintInterface] = []
        for constraint, _ in self._analyze_constraints(participants, constraints, legs):
            if constraint not in found:
                found.append(constraint)
        return found

    def suggest_constraint_adjustments(self, report: DiagnosticReport) -> List[str]:
        suggestions = []
        if report.missing_events > 0:
            suggestions.append(
                "Consider relaxing constraints that may be preventing event generation"
            )
        if report.impossible_pairings:
            suggestions.append(
                "Some participant pairings cannot be satisfied with current constraints"
            )
        if report.constraint_violations:
            suggestions.append("Review constraint configuration for potential conflicts")
        if report.get_context_value("leg", 1) > 1:
            suggestions.append("Multi-leg constraint validation may require different strategy")
        return suggestions

    def _analyze_constraints(
        self, participants: Sequence[Participant], constraints: ConstraintSet, legs: int
    ) -> List[Tuple[ConstraintInterface, str]]:
        found = []
        leg_rounds = rounds_per_leg(len(participants))
        for constraint in constraints:
            if isinstance(constraint, NoRepeatPairings) and legs > 1:
                found.append(
                    (
                        constraint,
                        f"{constraint.get_name()} forbids the repeat meetings "
                        f"that {legs} legs require",
                    )
                )
            elif (
                isinstance(constraint, MinimumRestPeriodsConstraint)
                and legs > 1
                and constraint.min_rounds > leg_rounds
            ):
                # the same fixture slot recurs once per leg
                found.append(
                    (
                        constraint,
                        f"{constraint.get_name()} cannot hold: repeat meetings "
                        f"come {leg_rounds} rounds apart",
                    )
                )
            elif isinstance(constraint, SeedProtectionConstraint):
                impossible = self.identify_impossible_pairings(
                    participants, ConstraintSet([constraint]), legs
                )
                if impossible:
                    found.append(
                        (
                            constraint,
                            f"{constraint.get_name()} keeps {len(impossible)} "
                            "top-seed pairings apart for the whole schedule",
                        )
                    )
        return found

    @staticmethod
    def _expected_events(participant_count: int, legs: int) -> int:
        if participant_count < 2:
            return 0
        return participant_count * (participant_count - 1) // 2 * legs

    def _suggestions(
        self, participant_count: int, generated: int, expected: int, legs: int
    ) -> List[str]:
        suggestions = []
        if generated == 0:
            suggestions.append(
                "No events were generated - check participant count and "
                "constraint configuration"
            )
        elif generated < expected:
            percentage = int(generated / expected * 100)
            suggestions.append(
                f"Only {percentage}% of expected events were generated - "
                "constraints may be too restrictive"
            )
        if legs > 1 and participant_count % 2 != 0:
            suggestions.append(
                "Odd participant count in multi-leg tournaments may cause "
                "scheduling challenges"
            )
        return suggestions
