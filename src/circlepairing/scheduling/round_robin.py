"""Round-robin scheduling with the circle (polygon) method."""

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
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from circlepairing.constants import (
    ALGORITHM_ROUND_ROBIN,
    META_ALGORITHM,
    META_LEG_STRATEGY,
    META_LEGS,
    META_PARTICIPANT_COUNT,
    META_PARTICIPANT_ORDERER,
    META_ROUNDS_PER_LEG,
    META_SEED,
    META_TOTAL_ROUNDS,
    MIN_PARTICIPANTS,
    PARTICIPANTS_PER_EVENT,
)
from circlepairing.constraints import ConstraintSet
from circlepairing.exceptions import (
    ImpossibleConstraintsException,
    InvalidConfigurationException,
)
from circlepairing.models import Event, Participant, Schedule
from circlepairing.ordering import (
    EventOrderingContext,
    ParticipantOrderer,
    StaticParticipantOrderer,
)
from circlepairing.positioning import (
    Position,
    PositionalPairing,
    PositionalRound,
    PositionalSchedule,
)
from circlepairing.scheduling.context import SchedulingContext
from circlepairing.scheduling.legs import (
    ConstraintSatisfiabilityReport,
    LegStrategy,
    RepeatedLegStrategy,
)
from circlepairing.type_hints import Pairing, RoundPairings, Seating
from circlepairing.utils import setup_logger
from circlepairing.validation import (
    ConstraintViolation,
    ConstraintViolationCollector,
    ExpectedEventCalculator,
    RoundRobinEventCalculator,
    ScheduleValidator,
    SchedulingDiagnostics,
)

logger = setup_logger(__name__)


def create_seating(
    participants: Sequence[Participant], seed: Optional[int] = None
) -> Seating:
    """Seat participants around the circle, adding a bye seat for odd counts.

    With a seed the real participants are shuffled first; the bye seat
    always stays last.
    """
    seating: Seating = list(participants)
    if seed is not None:
        random.Random(seed).shuffle(seating)
    if len(seating) % 2 == 1:
        seating.append(None)
    return seating


def rotate_seating(seating: Seating) -> Seating:
    """Rotate every seat but the anchor (seat 0) by one position."""
    if len(seating) <= 2:
        return list(seating)
    return [seating[0]] + seating[2:] + [seating[1]]


def generate_circle_rounds(seating: Seating) -> Iterator[RoundPairings]:
    """Yield the pairings of each round for one leg.

    Seat ``i`` meets seat ``len - 1 - i``; pairings with the bye seat are
    skipped, so that participant sits the round out.
    """
    working = list(seating)
    count = len(working)
    for _ in range(count - 1):
        round_pairings: RoundPairings = []
        for i in range(count // 2):
            first, second = working[i], working[count - 1 - i]
            if first is None or second is None:
                continue
            round_pairings.append((first, second))
        yield round_pairings
        working = rotate_seating(working)


class RoundRobinScheduler:
    """Generates complete round-robin schedules under pluggable rules.

    Leg 1 candidates are oriented by the participant orderer. Every later leg
    replays the leg-1 fixture in the same (round, index) slot through the leg
    strategy, so the orderer runs once per fixture. Each candidate is then
    checked against every constraint. Rejected candidates are recorded as
    violations and dropped; there is no backtracking. A shortfall against
    the closed-form event count is reported by ``IncompleteScheduleException``
    after the whole pass.
    """

    def __init__(
        self,
        constraints: Optional[ConstraintSet] = None,
        participant_orderer: Optional[ParticipantOrderer] = None,
        leg_strategy: Optional[LegStrategy] = None,
        seed: Optional[int] = None,
        event_calculator: Optional[ExpectedEventCalculator] = None,
    ):
        """Initialize the scheduler.

        Args:
            constraints: Constraints every event must satisfy (default none)
            participant_orderer: Home/away orientation strategy (default static)
            leg_strategy: Orientation of legs after the first (default repeated)
            seed: Shuffles the initial seating reproducibly when given
            event_calculator: Expected event formula (default round robin)
        """
        self.constraints = constraints if constraints is not None else ConstraintSet()
        self.participant_orderer = participant_orderer or StaticParticipantOrderer()
        self.leg_strategy = leg_strategy or RepeatedLegStrategy()
        self.seed = seed
        self.event_calculator = event_calculator or RoundRobinEventCalculator()
        self.validator = ScheduleValidator()
        self._violation_collector = ConstraintViolationCollector()

    def get_violation_collector(self) -> ConstraintViolationCollector:
        """Violations recorded by the most recent ``schedule()`` call."""
        return self._violation_collector

    def get_expected_event_calculator(self) -> ExpectedEventCalculator:
        return self.event_calculator

    def get_expected_event_count(
        self, participants: Sequence[Participant], legs: int = 1
    ) -> int:
        return self.event_calculator.calculate_expected_events(participants, legs)

    def schedule(self, participants: Sequence[Participant], legs: int = 1) -> Schedule:
        """Generate the schedule for ``participants`` over ``legs`` legs.

        Args:
            participants: Participants in seating order
            legs: Number of full repetitions of the round robin

        Returns:
            The complete schedule

        Raises:
            InvalidConfigurationException: On fewer than 2 participants,
                legs below 1 or duplicate participant ids
            IncompleteScheduleException: If constraints dropped events
        """
        participants = list(participants)
        schedule = self._generate(participants, legs)

        expected = self.get_expected_event_count(participants, legs)
        self.validator.validate_schedule_completeness(
            schedule,
            expected,
            self._violation_collector,
            self.event_calculator,
            participants,
            legs,
        )

        logger.info(
            "Generated %s events across %s rounds",
            len(schedule),
            schedule.get_metadata_value(META_TOTAL_ROUNDS),
        )
        return schedule

    def generate_round(
        self, participants: Sequence[Participant], round_number: int, legs: int = 1
    ) -> List[Event]:
        """Return the accepted events of one round.

        Runs the full pass, so orderers and constraints see the same history
        as in ``schedule()``, but does not require the schedule to be complete.

        Raises:
            InvalidConfigurationException: On invalid input or a round number
                outside the schedule
        """
        schedule = self._generate(list(participants), legs)
        total_rounds = schedule.get_metadata_value(META_TOTAL_ROUNDS)
        if not 1 <= round_number <= total_rounds:
            raise InvalidConfigurationException(
                f"Round number must be between 1 and {total_rounds}",
                {"round": round_number, "total_rounds": total_rounds},
            )
        return schedule.get_events_for_round(round_number)

    def generate_structure(
        self, participant_count: int, legs: int = 1
    ) -> PositionalSchedule:
        """Build the seed-position skeleton of the schedule.

        Seed ``n`` sits in seat ``n``; the seating seed and the participant
        orderer are not applied. Later legs follow the leg strategy.

        Raises:
            InvalidConfigurationException: On fewer than 2 participants or
                legs below 1
        """
        if participant_count < MIN_PARTICIPANTS:
            raise InvalidConfigurationException.invalid_participant_count(
                participant_count
            )
        if legs < 1:
            raise InvalidConfigurationException.invalid_leg_count(legs)

        seats = [Position.seed(value) for value in range(1, participant_count + 1)]
        if len(seats) % 2 == 1:
            seats.append(None)
        rounds_per_leg = len(seats) - 1

        rounds = []
        for leg in range(1, legs + 1):
            for round_in_leg, round_pairings in enumerate(
                generate_circle_rounds(seats), start=1
            ):
                pairings = [
                    PositionalPairing(
                        *self.leg_strategy.orient(pair, leg, round_in_leg, index)
                    )
                    for index, pair in enumerate(round_pairings)
                ]
                rounds.append(
                    PositionalRound((leg - 1) * rounds_per_leg + round_in_leg, pairings)
                )

        return PositionalSchedule(
            rounds,
            {
                META_ALGORITHM: ALGORITHM_ROUND_ROBIN,
                META_PARTICIPANT_COUNT: participant_count,
                META_TOTAL_ROUNDS: rounds_per_leg * legs,
                META_ROUNDS_PER_LEG: rounds_per_leg,
                META_LEGS: legs,
                META_LEG_STRATEGY: self.leg_strategy.get_name(),
            },
        )

    def supports_complete_generation(self) -> bool:
        """Round robins are fully determined by the seeding."""
        return True

    def validate_constraints(
        self, participants: Sequence[Participant], legs: int = 1
    ) -> ConstraintSatisfiabilityReport:
        """Check before generation that the constraints can all hold.

        Returns:
            The leg strategy's satisfiability report

        Raises:
            InvalidConfigurationException: On invalid input
            ImpossibleConstraintsException: If no complete schedule exists
        """
        participants = list(participants)
        self._validate_input(participants, legs)

        report = self.leg_strategy.can_satisfy_constraints(
            participants, legs, PARTICIPANTS_PER_EVENT, self.constraints
        )
        diagnostics = SchedulingDiagnostics()
        conflicts = list(report.unsatisfiable_constraints)
        conflicts.extend(
            diagnostics.identify_constraint_conflicts(participants, self.constraints, legs)
        )
        if conflicts:
            raise ImpossibleConstraintsException(
                diagnostics.find_conflicting_constraints(
                    participants, self.constraints, legs
                ),
                participants,
                legs,
                conflicts,
            )
        return report

    def _generate(self, participants: List[Participant], legs: int) -> Schedule:
        self._validate_input(participants, legs)

        collector = ConstraintViolationCollector()
        self._violation_collector = collector

        seating = create_seating(participants, self.seed)
        rounds_per_leg = len(seating) - 1
        total_rounds = rounds_per_leg * legs
        context = SchedulingContext(
            participants,
            total_legs=legs,
            metadata={
                META_TOTAL_ROUNDS: total_rounds,
                META_ROUNDS_PER_LEG: rounds_per_leg,
            },
        )

        logger.info(
            "Generating round-robin schedule: %s participants, %s legs, %s rounds",
            len(participants),
            legs,
            total_rounds,
        )

        # ordered leg-1 pairing per (round_in_leg, index) slot
        first_leg: Dict[Tuple[int, int], Pairing] = {}
        events: List[Event] = []
        for leg in range(1, legs + 1):
            context.current_leg = leg
            event_leg = leg if legs > 1 else None
            rounds = generate_circle_rounds(seating)
            for round_in_leg, round_pairings in enumerate(rounds, start=1):
                round_number = (leg - 1) * rounds_per_leg + round_in_leg
                for index, pairing in enumerate(round_pairings):
                    slot = (round_in_leg, index)
                    if leg == 1:
                        ordering_context = EventOrderingContext(
                            round_number, index, event_leg, context
                        )
                        first_leg[slot] = self.participant_orderer.order(
                            pairing, ordering_context
                        )
                    ordered = self.leg_strategy.orient(
                        first_leg[slot], leg, round_in_leg, index
                    )
                    event = Event(ordered, round=round_number, leg=event_leg)

                    if self._accept(event, context, collector):
                        events.append(event)
                        context.add_event(event)

        return Schedule(
            events,
            {
                META_ALGORITHM: ALGORITHM_ROUND_ROBIN,
                META_PARTICIPANT_COUNT: len(participants),
                META_TOTAL_ROUNDS: total_rounds,
                META_ROUNDS_PER_LEG: rounds_per_leg,
                META_LEGS: legs,
                META_LEG_STRATEGY: self.leg_strategy.get_name(),
                META_PARTICIPANT_ORDERER: self.participant_orderer.get_name(),
                META_SEED: self.seed,
            },
        )

    def _accept(
        self,
        event: Event,
        context: SchedulingContext,
        collector: ConstraintViolationCollector,
    ) -> bool:
        failing = self.constraints.get_failing_constraints(event, context)
        if not failing:
            return True

        for constraint in failing:
            collector.record_violation(
                ConstraintViolation(
                    constraint=constraint,
                    rejected_event=event,
                    reason=f"Rejected by {constraint.get_name()}",
                    affected_participants=event.participants,
                    round_number=event.round,
                )
            )
        logger.debug(
            "Round %s: dropped %s (%s)",
            event.round,
            event,
            ", ".join(c.get_name() for c in failing),
        )
        return False

    @staticmethod
    def _validate_input(participants: List[Participant], legs: int) -> None:
        if len(participants) < MIN_PARTICIPANTS:
            raise InvalidConfigurationException.invalid_participant_count(
                len(participants)
            )
        if legs < 1:
            raise InvalidConfigurationException.invalid_leg_count(legs)

        seen = set()
        duplicates = []
        for participant in participants:
            if participant.id in seen:
                duplicates.append(participant.id)
            seen.add(participant.id)
        if duplicates:
            raise InvalidConfigurationException(
                "All participants must have unique ids",
                {"duplicate_ids": sorted(set(duplicates))},
            )
