"""Round-robin schedule generation for Circle Pairing.

This package generates complete round-robin schedules with the circle method,
filters candidate events through pluggable constraints, orients each event
with a participant ordering strategy and reports any shortfall with a
diagnostic breakdown.
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

from circlepairing.models import Event, Participant, Schedule
from circlepairing.constraints import ConstraintInterface, ConstraintSet
from circlepairing.ordering import ParticipantOrderer
from circlepairing.exceptions import (
    CirclePairingException,
    ImpossibleConstraintsException,
    IncompleteScheduleException,
    InvalidConfigurationException,
)
from circlepairing.scheduling import RoundRobinScheduler
from circlepairing.config import SchedulerConfig

__version__ = "0.1.0"

__all__ = [
    "Participant",
    "Event",
    "Schedule",
    "ConstraintInterface",
    "ConstraintSet",
    "ParticipantOrderer",
    "CirclePairingException",
    "InvalidConfigurationException",
    "IncompleteScheduleException",
    "ImpossibleConstraintsException",
    "RoundRobinScheduler",
    "SchedulerConfig",
]
