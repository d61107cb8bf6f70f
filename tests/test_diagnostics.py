import pytest

from circlepairing.constraints import (
    ConstraintSet,
    MinimumRestPeriodsConstraint,
    NoRepeatPairings,
    SeedProtectionConstraint,
)
from circlepairing.exceptions import (
    ImpossibleConstraintsException,
    IncompleteScheduleException,
    InvalidConfigurationException,
)
from circlepairing.models import Event, Participant
from circlepairing.scheduling import RoundRobinScheduler
from circlepairing.validation import DiagnosticReport, SchedulingDiagnostics


def _participants(count, seeded=False):
    return [
        Participant(id=f"p{i}", label=f"Player {i}", seed=i if seeded else None)
        for i in range(1, count + 1)
    ]


@pytest.fixture
def no_repeat_failure():
    constraints = ConstraintSet([NoRepeatPairings()])
    with pytest.raises(IncompleteScheduleException) as exc_info:
        RoundRobinScheduler(constraints=constraints).schedule(_participants(4), legs=2)
    return constraints, exc_info.value


def test_missing_pairings_per_leg():
    p1, p2, p3, p4 = _participants(4)
    events = [
        Event((p1, p2), round=1, leg=1),
        Event((p3, p4), round=1, leg=1),
        Event((p2, p1), round=4, leg=2),
    ]

    missing = SchedulingDiagnostics().identify_missing_pairings([p1, p2, p3, p4], events, 2)

    assert missing == [
        "Player 1 vs Player 3 (Leg 1)",
        "Player 1 vs Player 3 (Leg 2)",
        "Player 1 vs Player 4 (Leg 1)",
        "Player 1 vs Player 4 (Leg 2)",
        "Player 2 vs Player 3 (Leg 1)",
        "Player 2 vs Player 3 (Leg 2)",
        "Player 2 vs Player 4 (Leg 1)",
        "Player 2 vs Player 4 (Leg 2)",
        "Player 3 vs Player 4 (Leg 2)",
    ]


def test_single_leg_events_count_as_first_leg():
    p1, p2, p3 = _participants(3)

    missing = SchedulingDiagnostics().identify_missing_pairings(
        [p1, p2, p3], [Event((p1, p2), round=1)], 1
    )

    assert missing == ["Player 1 vs Player 3 (Leg 1)", "Player 2 vs Player 3 (Leg 1)"]


def test_analyze_incomplete_schedule(no_repeat_failure):
    constraints, error = no_repeat_failure

    report = SchedulingDiagnostics().analyze_scheduling_failure(
        error.participants,
        constraints,
        error.partial_events,
        error.legs,
        violations=error.violation_collector,
    )

    assert (report.expected_events, report.generated_events, report.missing_events) == (12, 6, 6)
    assert len(report.missing_pairings) == 6
    assert all(line.endswith("(Leg 2)") for line in report.missing_pairings)
    assert len(report.constraint_violations) == 6
    assert report.impossible_pairings == []
    assert report.get_completion_percentage() == 50.0
    assert not report.is_successful()
    assert report.has_critical_issues()
    assert report.get_summary() == (
        "Schedule generation failed at 50% completion. "
        "6 events could not be generated. 6 constraint violations detected."
    )
    assert report.suggestions == [
        "Only 50% of expected events were generated - constraints may be too restrictive"
    ]


def test_incomplete_schedule_keeps_partial_events(no_repeat_failure):
    _, error = no_repeat_failure

    assert len(error.partial_events) == error.actual_event_count == 6
    assert all(event.leg == 1 for event in error.partial_events)


def test_suggestions_for_empty_odd_multi_leg_run():
    report = SchedulingDiagnostics().analyze_scheduling_failure(
        _participants(3), ConstraintSet(), [], 2
    )

    assert report.suggestions == [
        "No events were generated - check participant count and constraint configuration",
        "Odd participant count in multi-leg tournaments may cause scheduling challenges",
    ]


def test_constraint_adjustments_follow_report(no_repeat_failure):
    constraints, error = no_repeat_failure
    diagnostics = SchedulingDiagnostics()
    report = diagnostics.analyze_scheduling_failure(
        error.participants,
        constraints,
        error.partial_events,
        error.legs,
        violations=error.violation_collector,
        context={"leg": 2},
    )

    assert diagnostics.suggest_constraint_adjustments(report) == [
        "Consider relaxing constraints that may be preventing event generation",
        "Review constraint configuration for potential conflicts",
        "Multi-leg constraint validation may require different strategy",
    ]


def test_report_text_truncates_missing_pairings():
    report = DiagnosticReport(
        participant_count=8,
        expected_events=28,
        generated_events=14,
        missing_events=14,
        missing_pairings=[f"P{i} vs Q{i} (Leg 1)" for i in range(14)],
    )

    text = str(report)

    assert "Completion: 50.0%" in text
    assert "  - P9 vs Q9 (Leg 1)" in text
    assert "P10 vs Q10" not in text
    assert "  ... and 4 more" in text
    # exactly half missing is not critical
    assert not report.has_critical_issues()


def test_successful_report():
    report = DiagnosticReport(4, 6, 6, 0)

    assert report.is_successful()
    assert report.get_completion_percentage() == 100.0
    assert report.get_summary() == "Schedule generation completed successfully."
    assert DiagnosticReport(1, 0, 0, 0).get_completion_percentage() == 0.0


def test_no_repeat_conflicts_only_with_several_legs():
    diagnostics = SchedulingDiagnostics()
    constraints = ConstraintSet([NoRepeatPairings()])

    assert diagnostics.identify_constraint_conflicts(_participants(4), constraints, 1) == []
    assert diagnostics.identify_constraint_conflicts(_participants(4), constraints, 2) == [
        "No Repeat Pairings forbids the repeat meetings that 2 legs require"
    ]


@pytest.mark.parametrize("min_rounds,conflicting", [(3, False), (4, True)])
def test_rest_period_longer_than_a_leg_conflicts(min_rounds, conflicting):
    rest = MinimumRestPeriodsConstraint(min_rounds)
    diagnostics = SchedulingDiagnostics()

    conflicts = diagnostics.identify_constraint_conflicts(
        _participants(4), ConstraintSet([rest]), 2
    )

    if conflicting:
        assert conflicts == [
            "Minimum Rest Periods (4 rounds) cannot hold: repeat meetings come 3 rounds apart"
        ]
        assert diagnostics.find_conflicting_constraints(
            _participants(4), ConstraintSet([rest]), 2
        ) == [rest]
    else:
        assert conflicts == []


def test_seed_protection_over_whole_schedule_is_impossible():
    participants = _participants(4, seeded=True)
    diagnostics = SchedulingDiagnostics()
    full = ConstraintSet([SeedProtectionConstraint(2, 1.0)])
    half = ConstraintSet([SeedProtectionConstraint(2, 0.5)])

    assert diagnostics.identify_impossible_pairings(participants, full, 1) == [
        "Player 1 vs Player 2"
    ]
    assert diagnostics.identify_constraint_conflicts(participants, full, 1) == [
        "Seed Protection (top 2, 100% period) keeps 1 top-seed pairings "
        "apart for the whole schedule"
    ]
    assert diagnostics.identify_constraint_conflicts(participants, half, 1) == []


def test_too_few_participants_conflict():
    conflicts = SchedulingDiagnostics().identify_constraint_conflicts(
        _participants(1), ConstraintSet(), 1
    )

    assert conflicts == ["Insufficient participants for tournament generation"]


def test_validate_constraints_rejects_impossible_setup():
    no_repeat = NoRepeatPairings()
    scheduler = RoundRobinScheduler(constraints=ConstraintSet([no_repeat]))

    with pytest.raises(ImpossibleConstraintsException) as exc_info:
        scheduler.validate_constraints(_participants(4), legs=2)

    error = exc_info.value
    assert error.conflicting_constraints == [no_repeat]
    assert error.legs == 2
    assert str(error) == (
        "Impossible constraint configuration detected with 4 participants and 2 legs"
    )
    report = error.get_diagnostic_report()
    assert "=== DETECTED CONFLICTS ===" in report
    assert "Total events needed for Round Robin with 2 legs: 12" in report
    assert "NoRepeatPairings creates scheduling restrictions that may be impossible" in report


def test_validate_constraints_agrees_with_generation():
    participants = _participants(4)
    feasible = RoundRobinScheduler(
        constraints=ConstraintSet([MinimumRestPeriodsConstraint(3)])
    )
    infeasible = RoundRobinScheduler(
        constraints=ConstraintSet([MinimumRestPeriodsConstraint(4)])
    )

    report = feasible.validate_constraints(participants, legs=2)
    assert report.can_satisfy
    assert report.satisfiable_constraints == ["Minimum Rest Periods (3 rounds)"]
    assert len(feasible.schedule(participants, legs=2)) == 12

    with pytest.raises(ImpossibleConstraintsException) as exc_info:
        infeasible.validate_constraints(participants, legs=2)
    assert "requires 4 rest periods between events" in exc_info.value.get_diagnostic_report()
    with pytest.raises(IncompleteScheduleException):
        infeasible.schedule(participants, legs=2)


def test_validate_constraints_checks_input():
    with pytest.raises(InvalidConfigurationException):
        RoundRobinScheduler().validate_constraints(_participants(1))
