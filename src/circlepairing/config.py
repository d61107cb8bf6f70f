"""Scheduler configuration.

A ``SchedulerConfig`` describes a complete scheduler set-up (legs, ordering,
leg strategy, seed and constraints) and can be loaded from a JSON file.
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

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from circlepairing.constants import DEFAULT_LEG_STRATEGY, DEFAULT_ORDERER
from circlepairing.constraints import ConstraintSet
from circlepairing.exceptions import ConfigurationFileException
from circlepairing.ordering import ParticipantOrderer, create_participant_orderer
from circlepairing.scheduling import LegStrategy, RoundRobinScheduler, create_leg_strategy
from circlepairing.utils import setup_logger

logger = setup_logger(__name__)


@dataclass
class SchedulerConfig:
    """Configuration settings for a round-robin scheduler.

    Attributes:
        legs: Number of legs
        orderer: Participant orderer name ('static', 'alternating', ...)
        leg_strategy: Leg strategy name ('repeated', 'mirrored', 'shuffled')
        seed: Seed for the initial seating shuffle and shuffled legs
        no_repeat_pairings: Add the no-repeat-pairings constraint
        min_rest_rounds: Minimum rounds between two meetings of a pair
        max_consecutive_home_away: Longest allowed home or away run
        protected_seeds: Number of top seeds kept apart early
        protection_period: Fraction of rounds the top seeds are kept apart
    """

    legs: int = 1
    orderer: str = DEFAULT_ORDERER
    leg_strategy: str = DEFAULT_LEG_STRATEGY
    seed: Optional[int] = None
    no_repeat_pairings: bool = False
    min_rest_rounds: Optional[int] = None
    max_consecutive_home_away: Optional[int] = None
    protected_seeds: Optional[int] = None
    protection_period: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "legs": self.legs,
            "orderer": self.orderer,
            "leg_strategy": self.leg_strategy,
            "seed": self.seed,
            "no_repeat_pairings": self.no_repeat_pairings,
            "min_rest_rounds": self.min_rest_rounds,
            "max_consecutive_home_away": self.max_consecutive_home_away,
            "protected_seeds": self.protected_seeds,
            "protection_period": self.protection_period,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchedulerConfig":
        """Deserialize configuration from dictionary.

        Raises:
            ConfigurationFileException: If a value has the wrong type
        """
        return cls(
            legs=_read_value(data, "legs", int, 1),
            orderer=data.get("orderer", DEFAULT_ORDERER),
            leg_strategy=data.get("leg_strategy", DEFAULT_LEG_STRATEGY),
            seed=_read_value(data, "seed", int),
            no_repeat_pairings=bool(data.get("no_repeat_pairings", False)),
            min_rest_rounds=_read_value(data, "min_rest_rounds", int),
            max_consecutive_home_away=_read_value(data, "max_consecutive_home_away", int),
            protected_seeds=_read_value(data, "protected_seeds", int),
            protection_period=_read_value(data, "protection_period", float, 0.5),
        )

    def build_constraints(self) -> ConstraintSet:
        builder = ConstraintSet.create()
        if self.no_repeat_pairings:
            builder.no_repeat_pairings()
        if self.min_rest_rounds is not None:
            builder.minimum_rest_periods(self.min_rest_rounds)
        if self.max_consecutive_home_away is not None:
            builder.consecutive_home_away(self.max_consecutive_home_away)
        if self.protected_seeds is not None:
            builder.seed_protection(self.protected_seeds, self.protection_period)
        return builder.build()

    def build_orderer(self) -> ParticipantOrderer:
        return create_participant_orderer(self.orderer)

    def build_leg_strategy(self) -> LegStrategy:
        return create_leg_strategy(self.leg_strategy, self.seed)

    def build_scheduler(self) -> RoundRobinScheduler:
        """Create a scheduler wired with every configured collaborator."""
        return RoundRobinScheduler(
            constraints=self.build_constraints(),
            participant_orderer=self.build_orderer(),
            leg_strategy=self.build_leg_strategy(),
            seed=self.seed,
        )


def load_configuration(config_file: Optional[Union[str, Path]]) -> Optional[SchedulerConfig]:
    """Load scheduler configuration from a JSON file.

    Args:
        config_file: Path to a JSON file, or None

    Returns:
        The configuration, or None when no file was given

    Raises:
        ConfigurationFileException: If the file is missing, not valid JSON
            or holds a value of the wrong type
    """
    if not config_file:
        return None

    path = Path(config_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationFileException(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationFileException(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationFileException(
            f"Configuration in {path} must be a JSON object"
        )

    logger.info("Loaded configuration from %s", path)
    return SchedulerConfig.from_dict(data)


def _read_value(
    data: Dict[str, Any],
    key: str,
    convert: Callable[[Any], Any],
    default: Any = None,
) -> Any:
    """Convert ``data[key]``, leaving a missing or null value at ``default``."""
    value = data.get(key)
    if value is None:
        return default
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationFileException(
            f"Invalid value for '{key}': {value!r}"
        ) from e
