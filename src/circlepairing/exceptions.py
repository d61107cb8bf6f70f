"""Exceptions for use in Circle Pairing"""

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

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from circlepairing.constants import MIN_PARTICIPANTS, MOST_AFFECTED_LIMIT

if TYPE_CHECKING:
    from circlepairing.constraints import ConstraintInterface
    from circlepairing.models import Event, Participant
    from circlepairing.validation.calculators import ExpectedEventCalculator
    from circlepairing.validation.violations import ConstraintViolationCollector


# ========== Base Application Exception ==========


class CirclePairingException(Exception):
    """Base exception for all Circle Pairing errors.

    All custom exceptions in the package inherit from this class, so callers
    can catch every package-specific error with a single except clause.
    """

    pass


# ========== Scheduling Exceptions ==========


class SchedulingException(CirclePairingException):
    """Base exception for scheduling errors.

    Every scheduling error can render a diagnostic report with enough detail
    to act on the problem without re-running the scheduler.
    """

    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


class InvalidConfigurationException(SchedulingException, ValueError):
    """Raised when scheduler input or constraint parameters are invalid.

    Covers too few participants, non-positive leg counts, duplicate participant
    ids and malformed constraint parameters. It is also a ``ValueError`` so it
    reads as an invalid-argument failure to generic callers.
    """

    def __init__(
        self,
        configuration_issue: str,
        context: Optional[Dict[str, Any]] = None,
        message: str = "",
    ):
        self.configuration_issue = configuration_issue
        self.context = dict(context or {})
        super().__init__(message or configuration_issue)

    @classmethod
    def invalid_participant_count(cls, count: int) -> "InvalidConfigurationException":
        return cls(
            "Round-robin scheduling requires at least 2 participants",
            {"participant_count": count, "minimum_required": MIN_PARTICIPANTS},
        )

    @classmethod
    def invalid_leg_count(cls, legs: int) -> "InvalidConfigurationException":
        return cls("Number of legs must be at least 1", {"legs": legs})

    def get_diagnostic_report(self) -> str:
        lines = [
            "=== INVALID CONFIGURATION DIAGNOSTIC REPORT ===",
            "",
            f"Issue: {self.configuration_issue}",
        ]
        if self.context:
            lines.append("")
            lines.append("=== CONFIGURATION DETAILS ===")
            for key, value in self.context.items():
                lines.append(f"- {key}: {_format_value(value)}")
        lines.append("")
        lines.append("=== REQUIREMENTS ===")
        lines.append("- Participants must contain at least 2 entries")
        lines.append("- Legs must be a positive integer")
        lines.append("- All participants must have unique ids")
        lines.append("- Constraint parameters must be within their documented ranges")
        return "\n".join(lines)


class IncompleteScheduleException(SchedulingException):
    """Raised when constraints left the generated schedule short of events.

    Raised only after the full generation pass. Carries everything needed to
    rebuild a diagnostic report on demand.
    """

    def __init__(
        self,
        expected_event_count: int,
        actual_event_count: int,
        violation_collector: "ConstraintViolationCollector",
        event_calculator: "ExpectedEventCalculator",
        participants: Sequence["Participant"],
        legs: int,
        message: str = "",
        partial_events: Sequence["Event"] = (),
    ):
        self.expected_event_count = expected_event_count
        self.actual_event_count = actual_event_count
        self.violation_collector = violation_collector
        self.event_calculator = event_calculator
        self.participants = list(participants)
        self.legs = legs
        self.partial_events = list(partial_events)
        if not message:
            message = (
                f"Incomplete schedule generated: {actual_event_count} events created "
                f"out of {expected_event_count} expected "
                f"({expected_event_count - actual_event_count} missing)"
            )
        super().__init__(message)

    @property
    def missing_event_count(self) -> int:
        return self.expected_event_count - self.actual_event_count

    def get_diagnostic_report(self) -> str:
        """Render the full incompleteness report including suggestions."""
        missing_pct = self.missing_event_count / self.expected_event_count * 100
        lines = [
            "=== INCOMPLETE SCHEDULE DIAGNOSTIC REPORT ===",
            "",
            f"Algorithm: {self.event_calculator.get_algorithm_name()}",
            f"Participants: {len(self.participants)}",
            f"Legs: {self.legs}",
            f"Expected Events: {self.expected_event_count}",
            f"Generated Events: {self.actual_event_count}",
            f"Missing Events: {self.missing_event_count} ({missing_pct:.1f}%)",
            "",
        ]

        if self.violation_collector.has_violations():
            lines.append("=== CONSTRAINT VIOLATIONS ===")
            by_constraint = self.violation_collector.get_violations_by_constraint()
            for name, violations in by_constraint.items():
                lines.append(f"- {name}: {len(violations)} violations")

                participant_counts: Counter = Counter()
                round_counts: Counter = Counter()
                for violation in violations:
                    for participant in violation.affected_participants:
                        participant_counts[participant.id] += 1
                    if violation.round_number is not None:
                        round_counts[violation.round_number] += 1

                if participant_counts:
                    top = participant_counts.most_common(MOST_AFFECTED_LIMIT)
                    lines.append(
                        "  Most affected participants: "
                        + ", ".join(f"{pid} ({count})" for pid, count in top)
                    )
                if round_counts:
                    lines.append(
                        "  Affected rounds: "
                        + ", ".join(
                            f"{rnd} ({round_counts[rnd]})" for rnd in sorted(round_counts)
                        )
                    )
                lines.append("")

        lines.append("=== SUGGESTIONS ===")
        lines.extend(self._suggestions())
        return "\n".join(lines)

    def _suggestions(self) -> List[str]:
        suggestions: List[str] = []
        seen = []
        for violation in self.violation_collector.get_violations():
            kind = type(violation.constraint).__name__
            if kind not in seen:
                seen.append(kind)

        for kind in seen:
            if kind == "ConsecutiveRoleConstraint":
                suggestions.append("- Try raising the consecutive role limit")
                suggestions.append("- Consider increasing the number of participants")
                suggestions.append("- Add more legs to provide more scheduling flexibility")
            elif kind == "MinimumRestPeriodsConstraint":
                suggestions.append("- Reduce the minimum rest period requirement")
                suggestions.append("- Add more rounds to provide scheduling flexibility")
            elif kind == "NoRepeatPairings":
                suggestions.append(
                    "- This constraint cannot hold across several legs of one round robin"
                )
                suggestions.append("- Consider allowing repeat pairings between legs")
            elif kind == "SeedProtectionConstraint":
                suggestions.append("- Adjust seed protection settings")
                suggestions.append(
                    "- Ensure protected rounds do not conflict with other constraints"
                )
            else:
                suggestions.append(f"- Review {kind} settings for compatibility")

        if not suggestions:
            suggestions.append("- Try relaxing constraint requirements")
            suggestions.append("- Increase the number of participants or legs")

        suggestions.append("- Use fewer or less restrictive constraints")
        suggestions.append("- Test with a simpler configuration first")
        return suggestions


class ImpossibleConstraintsException(SchedulingException):
    """Raised by the pre-generation check when constraints cannot all hold.

    ``conflicts`` holds one human-readable line per detected problem and
    ``conflicting_constraints`` the constraint objects behind them.
    """

    def __init__(
        self,
        conflicting_constraints: Sequence["ConstraintInterface"],
        participants: Sequence["Participant"],
        legs: int,
        conflicts: Sequence[str] = (),
        message: str = "",
    ):
        self.conflicting_constraints = list(conflicting_constraints)
        self.participants = list(participants)
        self.legs = legs
        self.conflicts = list(conflicts)
        if not message:
            message = (
                "Impossible constraint configuration detected with "
                f"{len(self.participants)} participants and {legs} legs"
            )
        super().__init__(message)

    def get_diagnostic_report(self) -> str:
        lines = [
            "=== IMPOSSIBLE CONSTRAINTS DIAGNOSTIC REPORT ===",
            "",
            f"Participants: {len(self.participants)}",
            f"Legs: {self.legs}",
            "",
        ]

        if self.conflicts:
            lines.append("=== DETECTED CONFLICTS ===")
            lines.extend(f"- {conflict}" for conflict in self.conflicts)
            lines.append("")

        lines.append("=== CONFLICTING CONSTRAINTS ===")
        for constraint in self.conflicting_constraints:
            lines.append(f"- {type(constraint).__name__}: {constraint.get_name()}")
        lines.append("")

        lines.append("=== MATHEMATICAL ANALYSIS ===")
        lines.extend(self._analysis())
        lines.append("")

        lines.append("=== SUGGESTIONS ===")
        lines.append("- Reduce constraint restrictions (lower limits, fewer requirements)")
        lines.append("- Increase the number of participants to provide more scheduling flexibility")
        lines.append("- Remove conflicting constraints")
        lines.append("- Test with a minimal constraint set first")
        return "\n".join(lines)

    def _analysis(self) -> List[str]:
        count = len(self.participants)
        total_events = count * (count - 1) // 2 * self.legs
        lines = [
            f"Total events needed for Round Robin with {self.legs} legs: {total_events}"
        ]
        for constraint in self.conflicting_constraints:
            kind = type(constraint).__name__
            if kind == "ConsecutiveRoleConstraint":
                limit = constraint.max_consecutive
                lines.append(
                    f"{kind} with limit {limit} requires at least "
                    f"{-(-count // limit)} rounds"
                )
            elif kind == "MinimumRestPeriodsConstraint":
                lines.append(
                    f"{kind} requires {constraint.min_rounds} rest periods between events"
                )
            else:
                lines.append(
                    f"{kind} creates scheduling restrictions that may be impossible"
                )
        if len(lines) == 1:
            lines.append(
                "The constraint configuration creates impossible scheduling requirements."
            )
        return lines


# ========== Configuration File Exceptions ==========


class ConfigurationFileException(CirclePairingException):
    """Raised when a configuration file cannot be read or parsed."""

    pass


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple, dict, set)):
        return f"[{len(value)} items]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)
