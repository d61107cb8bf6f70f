"""Schedule completeness validation and diagnostics."""

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

from typing import List, Sequence

from circlepairing.constants import HIGH_VIOLATION_RATIO
from circlepairing.exceptions import IncompleteScheduleException
from circlepairing.models import Participant, Schedule
from circlepairing.utils import setup_logger
from circlepairing.validation.calculators import ExpectedEventCalculator
from circlepairing.validation.violations import ConstraintViolationCollector

logger = setup_logger(__name__)


class ScheduleValidator:
    """Checks generated schedules against their closed-form event count.

    Owned by each scheduler and invoked once per run after generation.
    """

    def validate_schedule_completeness(
        self,
        schedule: Schedule,
        expected_event_count: int,
        violations: ConstraintViolationCollector,
        event_calculator: ExpectedEventCalculator,
        participants: Sequence[Participant],
        legs: int,
    ) -> None:
        """Raise if the schedule holds fewer events than expected.

        Args:
            schedule: The generated schedule
            expected_event_count: Events a complete schedule would hold
            violations: Collector populated during generation
            event_calculator: Calculator that produced the expectation
            participants: Participants that were scheduled
            legs: Number of legs

        Raises:
            IncompleteScheduleException: If ``len(schedule) < expected_event_count``
        """
        actual_event_count = len(schedule)
        if actual_event_count < expected_event_count:
            logger.warning(
                "Schedule incomplete: %s of %s events (%s violations recorded)",
                actual_event_count,
                expected_event_count,
                violations.get_violation_count(),
            )
            raise IncompleteScheduleException(
                expected_event_count,
                actual_event_count,
                violations,
                event_calculator,
                participants,
                legs,
                partial_events=schedule.events,
            )

    def generate_diagnostic_report(
        self,
        violations: ConstraintViolationCollector,
        expected_events: int,
        actual_events: int,
        algorithm_name: str,
    ) -> str:
        """Summarize the shortfall and break violations down.

        The breakdown lists counts per constraint name (with the sorted,
        distinct rounds they happened in) and counts per participant id.
        """
        missing = expected_events - actual_events
        lines = [
            f"Cannot generate complete {algorithm_name} schedule.",
            f"Expected: {expected_events} events",
            f"Generated: {actual_events} events ({missing} missing)",
            "",
        ]

        if violations.has_violations():
            lines.append("Constraint violations:")
            for name, grouped in violations.get_violations_by_constraint().items():
                rounds = sorted(
                    {v.round_number for v in grouped if v.round_number is not None}
                )
                rounds_text = (
                    " in rounds [" + ",".join(str(r) for r in rounds) + "]"
                    if rounds
                    else ""
                )
                lines.append(f"  - {name}: {len(grouped)} violations{rounds_text}")

            lines.append("")
            lines.append("Participant impact:")
            for participant_id, grouped in violations.get_violations_by_participant().items():
                lines.append(f"  - {participant_id}: {len(grouped)} violations")

        return "\n".join(lines) + "\n"

    def generate_constraint_suggestions(
        self, violations: ConstraintViolationCollector, participant_count: int
    ) -> str:
        """Targeted tuning advice for the constraints that fired.

        Raises:
            ZeroDivisionError: If violations exist and ``participant_count < 2``
        """
        if not violations.has_violations():
            return ""

        lines: List[str] = ["", "Suggestions:"]
        for name, count in violations.get_violation_counts_by_constraint().items():
            lowered = name.lower()
            if "consecutive" in lowered:
                lines.append(f"  - Consider increasing the consecutive limit for '{name}'")
            elif "rest" in lowered:
                lines.append(
                    f"  - Consider reducing rest period requirements for '{name}'"
                )
            elif "seed" in lowered:
                lines.append(f"  - Consider reducing seed protection rounds for '{name}'")
            else:
                lines.append(f"  - Review configuration for '{name}' ({count} violations)")

        total = violations.get_violation_count()
        ratio = total / (participant_count * (participant_count - 1) / 2)
        if ratio > HIGH_VIOLATION_RATIO:
            lines.append(
                f"  - High violation ratio ({total} violations) suggests "
                "constraints may be too restrictive"
            )
            lines.append(
                "  - Consider relaxing constraint parameters or reducing participant count"
            )

        return "\n".join(lines) + "\n"
