from itertools import combinations

import pytest

from circlepairing.constraints import CallableConstraint, ConstraintSet, NoRepeatPairings
from circlepairing.exceptions import (
    IncompleteScheduleException,
    InvalidConfigurationException,
)
from circlepairing.models import Participant
from circlepairing.ordering import (
    AlternatingParticipantOrderer,
    BalancedParticipantOrderer,
    SeededRandomParticipantOrderer,
)
from circlepairing.scheduling import (
    MirroredLegStrategy,
    RoundRobinScheduler,
    ShuffledLegStrategy,
    create_seating,
    generate_circle_rounds,
    rotate_seating,
)


def _participants(count):
    return [Participant(id=f"p{i}", label=f"Player {i}") for i in range(1, count + 1)]


def _pairs(schedule):
    return [event.pairing_key() for event in schedule]


def _sequence(schedule):
    return [(e.round, e.leg, tuple(p.id for p in e.participants)) for e in schedule]


@pytest.mark.parametrize("count", range(2, 12))
def test_event_and_round_counts(count):
    schedule = RoundRobinScheduler().schedule(_participants(count))

    assert len(schedule) == count * (count - 1) // 2
    expected_rounds = count - 1 if count % 2 == 0 else count
    assert schedule.get_max_round() == expected_rounds


@pytest.mark.parametrize("count", range(2, 12))
def test_every_pair_meets_exactly_once(count):
    participants = _participants(count)
    schedule = RoundRobinScheduler().schedule(participants)

    pairs = _pairs(schedule)
    assert len(pairs) == len(set(pairs))
    expected = {frozenset({a.id, b.id}) for a, b in combinations(participants, 2)}
    assert set(pairs) == expected


@pytest.mark.parametrize("count", range(2, 12))
def test_round_cardinality(count):
    schedule = RoundRobinScheduler().schedule(_participants(count))

    for round_number in schedule.get_rounds():
        assert len(schedule.get_events_for_round(round_number)) == count // 2


def test_no_participant_plays_twice_in_a_round():
    schedule = RoundRobinScheduler().schedule(_participants(9))

    for round_number in schedule.get_rounds():
        ids = [p.id for e in schedule.get_events_for_round(round_number) for p in e.participants]
        assert len(ids) == len(set(ids))


def test_four_participants():
    schedule = RoundRobinScheduler().schedule(_participants(4))

    assert len(schedule) == 6
    assert schedule.get_rounds() == [1, 2, 3]
    assert len(schedule.get_events_for_round(1)) == 2
    assert set(_pairs(schedule)) == {
        frozenset(pair)
        for pair in [
            ("p1", "p2"),
            ("p1", "p3"),
            ("p1", "p4"),
            ("p2", "p3"),
            ("p2", "p4"),
            ("p3", "p4"),
        ]
    }


def test_four_participants_static_order():
    schedule = RoundRobinScheduler().schedule(_participants(4))

    assert _sequence(schedule) == [
        (1, None, ("p1", "p4")),
        (1, None, ("p2", "p3")),
        (2, None, ("p1", "p2")),
        (2, None, ("p3", "p4")),
        (3, None, ("p1", "p3")),
        (3, None, ("p4", "p2")),
    ]


def test_three_participants_have_one_bye_per_round():
    participants = _participants(3)
    schedule = RoundRobinScheduler().schedule(participants)

    assert len(schedule) == 3
    assert schedule.get_rounds() == [1, 2, 3]
    resting = []
    for round_number in schedule.get_rounds():
        events = schedule.get_events_for_round(round_number)
        assert len(events) == 1
        playing = {p.id for p in events[0].participants}
        resting.extend(p.id for p in participants if p.id not in playing)
    assert sorted(resting) == ["p1", "p2", "p3"]


@pytest.mark.parametrize("count", [0, 1])
def test_too_few_participants_rejected(count):
    with pytest.raises(InvalidConfigurationException) as exc_info:
        RoundRobinScheduler().schedule(_participants(count))

    assert isinstance(exc_info.value, ValueError)
    assert exc_info.value.context["participant_count"] == count


def test_leg_count_must_be_positive():
    with pytest.raises(InvalidConfigurationException):
        RoundRobinScheduler().schedule(_participants(4), legs=0)


def test_duplicate_ids_rejected():
    participants = _participants(3) + [Participant(id="p1", label="Impostor")]

    with pytest.raises(InvalidConfigurationException) as exc_info:
        RoundRobinScheduler().schedule(participants)

    assert exc_info.value.context["duplicate_ids"] == ["p1"]


def test_metadata():
    schedule = RoundRobinScheduler().schedule(_participants(5))

    assert schedule.get_metadata_value("algorithm") == "round-robin"
    assert schedule.get_metadata_value("participant_count") == 5
    assert schedule.get_metadata_value("total_rounds") == 5
    assert schedule.get_metadata_value("legs") == 1
    assert schedule.get_metadata_value("participant_orderer") == "static"
    assert schedule.get_metadata_value("leg_strategy") == "repeated"


def test_same_seed_gives_identical_schedules():
    def build():
        return RoundRobinScheduler(
            participant_orderer=SeededRandomParticipantOrderer(),
            leg_strategy=ShuffledLegStrategy(seed=7),
            seed=7,
        ).schedule(_participants(8), legs=2)

    assert _sequence(build()) == _sequence(build())


def test_seeded_schedule_is_still_complete():
    participants = _participants(7)
    schedule = RoundRobinScheduler(seed=2024).schedule(participants)

    expected = {frozenset({a.id, b.id}) for a, b in combinations(participants, 2)}
    assert set(_pairs(schedule)) == expected
    assert schedule.get_metadata_value("seed") == 2024


def test_scheduler_does_not_mutate_input():
    participants = _participants(6)
    original = list(participants)

    RoundRobinScheduler(seed=3).schedule(participants)

    assert participants == original


@pytest.mark.parametrize("count", [4, 5, 8, 9])
def test_no_repeat_constraint_single_leg(count):
    constraints = ConstraintSet.create().no_repeat_pairings().build()
    schedule = RoundRobinScheduler(constraints=constraints).schedule(_participants(count))

    pairs = _pairs(schedule)
    assert len(pairs) == len(set(pairs))
    assert len(pairs) == count * (count - 1) // 2


@pytest.mark.parametrize(
    "orderer",
    [
        AlternatingParticipantOrderer(),
        SeededRandomParticipantOrderer(),
        BalancedParticipantOrderer(),
    ],
)
def test_orderers_keep_pairings(orderer):
    participants = _participants(6)
    schedule = RoundRobinScheduler(participant_orderer=orderer).schedule(participants)

    expected = {frozenset({a.id, b.id}) for a, b in combinations(participants, 2)}
    assert set(_pairs(schedule)) == expected


def test_alternating_orderer_reverses_odd_slots():
    schedule = RoundRobinScheduler(
        participant_orderer=AlternatingParticipantOrderer()
    ).schedule(_participants(4))

    assert [tuple(p.id for p in e.participants) for e in schedule.get_events_for_round(1)] == [
        ("p1", "p4"),
        ("p3", "p2"),
    ]


def test_incomplete_schedule_attributes_gap_to_blocked_participant():
    participants = _participants(6)
    blocked = participants[2]
    constraints = ConstraintSet.create().custom(
        lambda event, context: not event.has_participant(blocked), "Blocked participant"
    ).build()
    scheduler = RoundRobinScheduler(constraints=constraints)

    with pytest.raises(IncompleteScheduleException) as exc_info:
        scheduler.schedule(participants)

    error = exc_info.value
    assert error.expected_event_count == 15
    assert error.missing_event_count == len(participants) - 1
    by_participant = error.violation_collector.get_violations_by_participant()
    assert len(by_participant[blocked.id]) == error.missing_event_count
    for participant in participants:
        if participant.id != blocked.id:
            assert len(by_participant[participant.id]) == 1
    assert scheduler.get_violation_collector() is error.violation_collector


def test_every_failing_constraint_is_recorded():
    reject_all = ConstraintSet(
        [
            CallableConstraint(lambda event, context: False, "First"),
            CallableConstraint(lambda event, context: False, "Second"),
        ]
    )
    scheduler = RoundRobinScheduler(constraints=reject_all)

    with pytest.raises(IncompleteScheduleException) as exc_info:
        scheduler.schedule(_participants(4))

    counts = exc_info.value.violation_collector.get_violation_counts_by_constraint()
    assert counts == {"First": 6, "Second": 6}
    assert exc_info.value.actual_event_count == 0


def test_violations_reset_between_runs():
    constraints = ConstraintSet([CallableConstraint(lambda e, c: e.round != 1, "No round one")])
    scheduler = RoundRobinScheduler(constraints=constraints)

    with pytest.raises(IncompleteScheduleException):
        scheduler.schedule(_participants(4))
    assert scheduler.get_violation_collector().get_violation_count() == 2

    with pytest.raises(IncompleteScheduleException):
        scheduler.schedule(_participants(6))
    assert scheduler.get_violation_collector().get_violation_count() == 3


def test_incomplete_schedule_logs_warning(caplog):
    constraints = ConstraintSet([CallableConstraint(lambda e, c: False, "Never")])

    with caplog.at_level("WARNING"):
        with pytest.raises(IncompleteScheduleException):
            RoundRobinScheduler(constraints=constraints).schedule(_participants(3))

    assert "Schedule incomplete" in caplog.text


def test_single_leg_events_have_no_leg():
    schedule = RoundRobinScheduler().schedule(_participants(4))

    assert all(event.leg is None for event in schedule)


def test_multi_leg_rounds_are_continuous():
    schedule = RoundRobinScheduler().schedule(_participants(4), legs=3)

    assert len(schedule) == 18
    assert schedule.get_rounds() == list(range(1, 10))
    assert schedule.get_metadata_value("total_rounds") == 9
    assert schedule.get_metadata_value("rounds_per_leg") == 3
    for event in schedule:
        assert event.leg == (event.round - 1) // 3 + 1


def test_mirrored_legs_swap_home_and_away():
    schedule = RoundRobinScheduler(leg_strategy=MirroredLegStrategy()).schedule(
        _participants(5), legs=2
    )

    first_leg = [e for e in schedule if e.leg == 1]
    second_leg = [e for e in schedule if e.leg == 2]
    assert len(first_leg) == len(second_leg) == 10
    for first, second in zip(first_leg, second_leg):
        assert second.round == first.round + 5
        assert second.participants == (first.away, first.home)


@pytest.mark.parametrize(
    "orderer", [SeededRandomParticipantOrderer(), BalancedParticipantOrderer()]
)
def test_mirrored_legs_reverse_ordered_first_leg(orderer):
    schedule = RoundRobinScheduler(
        participant_orderer=orderer, leg_strategy=MirroredLegStrategy()
    ).schedule(_participants(6), legs=2)

    first_leg = [e for e in schedule if e.leg == 1]
    second_leg = [e for e in schedule if e.leg == 2]
    assert len(first_leg) == len(second_leg) == 15
    for first, second in zip(first_leg, second_leg):
        assert second.round == first.round + 5
        assert second.participants == (first.away, first.home)


def test_mirrored_legs_after_the_second_stay_reversed():
    schedule = RoundRobinScheduler(leg_strategy=MirroredLegStrategy()).schedule(
        _participants(4), legs=3
    )

    legs = [[e.participants for e in schedule if e.leg == leg] for leg in (1, 2, 3)]
    assert legs[2] == legs[1]
    assert legs[1] == [(away, home) for home, away in legs[0]]


def test_repeated_legs_replay_ordered_first_leg():
    schedule = RoundRobinScheduler(
        participant_orderer=BalancedParticipantOrderer()
    ).schedule(_participants(6), legs=2)

    first_leg = [e.participants for e in schedule if e.leg == 1]
    second_leg = [e.participants for e in schedule if e.leg == 2]
    assert first_leg == second_leg


def test_generate_round_returns_accepted_events():
    scheduler = RoundRobinScheduler(leg_strategy=MirroredLegStrategy())
    participants = _participants(4)

    full = scheduler.schedule(participants, legs=2)
    round_five = scheduler.generate_round(participants, 5, legs=2)

    assert round_five == full.get_events_for_round(5)
    assert all(event.leg == 2 for event in round_five)


def test_generate_round_does_not_require_completeness():
    constraints = ConstraintSet([NoRepeatPairings()])
    scheduler = RoundRobinScheduler(constraints=constraints)

    assert len(scheduler.generate_round(_participants(4), 1, legs=2)) == 2
    assert scheduler.generate_round(_participants(4), 4, legs=2) == []


@pytest.mark.parametrize("round_number", [0, 4])
def test_generate_round_rejects_round_outside_schedule(round_number):
    with pytest.raises(InvalidConfigurationException):
        RoundRobinScheduler().generate_round(_participants(4), round_number)


def test_round_robin_supports_complete_generation():
    assert RoundRobinScheduler().supports_complete_generation()


def test_no_repeat_constraint_blocks_second_leg():
    participants = _participants(4)
    constraints = ConstraintSet([NoRepeatPairings()])

    with pytest.raises(IncompleteScheduleException) as exc_info:
        RoundRobinScheduler(constraints=constraints).schedule(participants, legs=2)

    assert exc_info.value.expected_event_count == 12
    assert exc_info.value.actual_event_count == 6
    assert exc_info.value.violation_collector.get_affected_rounds() == [4, 5, 6]


def test_expected_event_count():
    scheduler = RoundRobinScheduler()

    assert scheduler.get_expected_event_count(_participants(6)) == 15
    assert scheduler.get_expected_event_count(_participants(6), legs=2) == 30
    assert scheduler.get_expected_event_calculator().get_algorithm_name() == "Round Robin"


def test_create_seating_adds_bye_seat_last():
    seating = create_seating(_participants(5), seed=11)

    assert len(seating) == 6
    assert seating[-1] is None
    assert {p.id for p in seating[:-1]} == {f"p{i}" for i in range(1, 6)}


def test_rotate_seating_keeps_anchor():
    seating = _participants(4)

    rotated = rotate_seating(seating)

    assert [p.id for p in rotated] == ["p1", "p3", "p4", "p2"]
    assert [p.id for p in seating] == ["p1", "p2", "p3", "p4"]


def test_generate_circle_rounds_skips_bye():
    rounds = list(generate_circle_rounds(create_seating(_participants(3))))

    assert [[(a.id, b.id) for a, b in pairings] for pairings in rounds] == [
        [("p2", "p3")],
        [("p1", "p2")],
        [("p1", "p3")],
    ]
