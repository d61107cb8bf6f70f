"""Command-line interface for Circle Pairing.

Provides the ``circle-pairing`` command with a one-shot ``schedule``
sub-command and an ``interactive`` shell with autocompletion.
"""

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

import argparse
import json
import logging
import shlex
import sys
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from circlepairing.config import SchedulerConfig, load_configuration
from circlepairing.constants import (
    LEG_STRATEGY_CHOICES,
    META_PARTICIPANT_COUNT,
    META_TOTAL_ROUNDS,
    ORDERER_CHOICES,
)
from circlepairing.exceptions import (
    CirclePairingException,
    ConfigurationFileException,
    ImpossibleConstraintsException,
    IncompleteScheduleException,
    InvalidConfigurationException,
)
from circlepairing.models import Participant, Schedule
from circlepairing.scheduling import RoundRobinScheduler
from circlepairing.utils import setup_logger
from circlepairing.validation import ScheduleValidator, SchedulingDiagnostics

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INCOMPLETE = 2
EXIT_IMPOSSIBLE = 3

SCHEDULE_OPTIONS = [
    "--participants",
    "--participants-file",
    "--legs",
    "--orderer",
    "--leg-strategy",
    "--seed",
    "--no-repeat",
    "--min-rest",
    "--max-consecutive",
    "--protect-seeds",
    "--protection-period",
    "--config",
    "--preflight",
    "--json",
]


def parse_participant(value: str, position: int) -> Participant:
    """Parse one participant entry.

    Accepted forms are ``label``, ``id:label`` and ``id:label:seed``. A bare
    label gets the id ``p<position>``.

    Raises:
        argparse.ArgumentTypeError: If the seed is not an integer
    """
    parts = [part.strip() for part in value.split(":")]
    if len(parts) == 1:
        return Participant(id=f"p{position}", label=parts[0])
    if len(parts) == 2:
        return Participant(id=parts[0], label=parts[1])
    try:
        seed = int(parts[2])
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid seed '{parts[2]}' for participant '{parts[1]}'. Must be an integer"
        )
    return Participant(id=parts[0], label=parts[1], seed=seed)


def parse_participant_list(value: str) -> List[Participant]:
    """Parse a comma separated participant list.

    Examples:
        >>> [p.id for p in parse_participant_list("Ann,Ben")]
        ['p1', 'p2']
    """
    entries = [entry for entry in (e.strip() for e in value.split(",")) if entry]
    return [parse_participant(entry, i) for i, entry in enumerate(entries, start=1)]


def read_participants_file(path: str) -> List[Participant]:
    """Read one participant entry per non-empty, non-comment line."""
    participants = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            participants.append(parse_participant(line, len(participants) + 1))
    return participants


def build_config(args: argparse.Namespace) -> SchedulerConfig:
    """Merge a JSON configuration file with command-line overrides."""
    config = load_configuration(args.config) or SchedulerConfig()

    if args.legs is not None:
        config.legs = args.legs
    if args.orderer is not None:
        config.orderer = args.orderer
    if args.leg_strategy is not None:
        config.leg_strategy = args.leg_strategy
    if args.seed is not None:
        config.seed = args.seed
    if args.no_repeat:
        config.no_repeat_pairings = True
    if args.min_rest is not None:
        config.min_rest_rounds = args.min_rest
    if args.max_consecutive is not None:
        config.max_consecutive_home_away = args.max_consecutive
    if args.protect_seeds is not None:
        config.protected_seeds = args.protect_seeds
    if args.protection_period is not None:
        config.protection_period = args.protection_period
    return config


def print_schedule(schedule: Schedule) -> None:
    """Print a schedule round by round."""
    print("\n" + "=" * 70)
    print(
        f"ROUND ROBIN SCHEDULE: {schedule.get_metadata_value(META_PARTICIPANT_COUNT)} "
        f"participants, {schedule.get_metadata_value(META_TOTAL_ROUNDS)} rounds"
    )
    print("=" * 70)

    for round_number in schedule.get_rounds():
        print(f"\nRound {round_number}:")
        for event in schedule.get_events_for_round(round_number):
            print(f"  {event.home.label:<25} vs  {event.away.label}")

    print("\n" + "=" * 70)
    print(f"Total events: {len(schedule)}")
    print("=" * 70 + "\n")


def print_incomplete(
    error: IncompleteScheduleException, scheduler: RoundRobinScheduler
) -> None:
    """Print the diagnostic reports and tuning suggestions for a shortfall."""
    validator = ScheduleValidator()
    print(error.get_diagnostic_report())
    print()
    print(
        SchedulingDiagnostics().analyze_scheduling_failure(
            error.participants,
            scheduler.constraints,
            error.partial_events,
            error.legs,
        )
    )
    print()
    print(
        validator.generate_diagnostic_report(
            error.violation_collector,
            error.expected_event_count,
            error.actual_event_count,
            error.event_calculator.get_algorithm_name(),
        )
    )
    print(
        validator.generate_constraint_suggestions(
            error.violation_collector, len(error.participants)
        )
    )


def run_schedule(args: argparse.Namespace) -> int:
    """Run the schedule command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 2 for an incomplete schedule, 3 when
        ``--preflight`` finds the constraints impossible)
    """
    if args.participants_file:
        participants = read_participants_file(args.participants_file)
    elif args.participants:
        participants = args.participants
    else:
        print("Error: provide --participants or --participants-file")
        return EXIT_ERROR

    try:
        config = build_config(args)
        scheduler = config.build_scheduler()
        if args.preflight:
            scheduler.validate_constraints(participants, legs=config.legs)
        schedule = scheduler.schedule(participants, legs=config.legs)
    except ImpossibleConstraintsException as e:
        logger.warning("%s", e)
        print(e.get_diagnostic_report())
        return EXIT_IMPOSSIBLE
    except IncompleteScheduleException as e:
        logger.warning("%s", e)
        print_incomplete(e, scheduler)
        return EXIT_INCOMPLETE
    except InvalidConfigurationException as e:
        print(e.get_diagnostic_report())
        return EXIT_ERROR
    except ConfigurationFileException as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    if args.json:
        print(json.dumps(schedule.to_dict(), indent=2))
    else:
        print_schedule(schedule)
    return EXIT_OK


def add_schedule_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the schedule command options on ``parser``."""
    parser.add_argument(
        "--participants",
        type=parse_participant_list,
        help="Comma separated participants: 'label', 'id:label' or 'id:label:seed'",
    )
    parser.add_argument(
        "--participants-file",
        help="Text file with one participant entry per line",
    )
    parser.add_argument("--legs", type=int, help="Number of legs (default: 1)")
    parser.add_argument(
        "--orderer",
        choices=ORDERER_CHOICES,
        help="Home/away ordering strategy (default: static)",
    )
    parser.add_argument(
        "--leg-strategy",
        choices=LEG_STRATEGY_CHOICES,
        help="Orientation of legs after the first (default: repeated)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument(
        "--no-repeat", action="store_true", help="Forbid repeated pairings"
    )
    parser.add_argument(
        "--min-rest", type=int, help="Minimum rounds between two meetings of a pair"
    )
    parser.add_argument(
        "--max-consecutive",
        type=int,
        help="Longest allowed run of home or away events",
    )
    parser.add_argument(
        "--protect-seeds", type=int, help="Keep this many top seeds apart early"
    )
    parser.add_argument(
        "--protection-period",
        type=float,
        help="Fraction of rounds the top seeds are kept apart (default: 0.5)",
    )
    parser.add_argument("--config", help="Load configuration from JSON file")
    parser.add_argument(
        "--preflight",
        action="store_true",
        help="Check the constraints for impossible combinations before generating",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the schedule as JSON"
    )


def create_schedule_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schedule", add_help=True)
    add_schedule_arguments(parser)
    return parser


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="circle-pairing",
        description="Generate round-robin schedules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Four teams, single leg
  circle-pairing schedule --participants "Ajax,Benfica,Celtic,Dynamo"

  # Home and away legs with balanced ordering
  circle-pairing schedule --participants-file teams.txt --legs 2 \\
      --leg-strategy mirrored --orderer balanced

  # Use configuration file
  circle-pairing schedule --participants-file teams.txt --config league.json

  # Reject impossible constraint combinations before generating
  circle-pairing schedule --participants-file teams.txt --legs 2 --no-repeat --preflight
        """,
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    schedule_parser = subparsers.add_parser("schedule", help="Generate a schedule")
    add_schedule_arguments(schedule_parser)
    subparsers.add_parser("interactive", help="Start the interactive shell")
    return parser


def run_interactive_mode() -> int:
    """Run in interactive mode with autocomplete."""
    style = Style.from_dict({"prompt": "#00aa00 bold"})
    session = PromptSession(
        completer=WordCompleter(["schedule", "help", "exit"] + SCHEDULE_OPTIONS),
        history=InMemoryHistory(),
        style=style,
    )
    schedule_parser = create_schedule_parser()

    print("Circle Pairing interactive shell. Type 'help' for commands, 'exit' to quit.")
    while True:
        try:
            user_input = session.prompt("circle-pairing> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return EXIT_OK

        if not user_input:
            continue
        if user_input in ("exit", "quit", "q"):
            return EXIT_OK
        if user_input in ("help", "?"):
            schedule_parser.print_help()
            continue

        try:
            parts = shlex.split(user_input)
        except ValueError as e:
            print(f"Error: {e}")
            continue
        if not parts:
            continue
        if parts[0] != "schedule":
            print(f"Unknown command: {parts[0]}")
            continue

        try:
            args = schedule_parser.parse_args(parts[1:])
        except SystemExit:
            # argparse already printed the usage error
            continue
        try:
            run_schedule(args)
        except OSError as e:
            print(f"Error: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger("circlepairing").setLevel(logging.DEBUG)

    try:
        if args.command == "schedule":
            return run_schedule(args)
        if args.command == "interactive":
            return run_interactive_mode()
        parser.print_help()
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (CirclePairingException, OSError) as e:
        logger.error("Scheduling failed: %s", e, exc_info=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
