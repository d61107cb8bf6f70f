"""Schedule generation.

This package holds the round-robin scheduler, the live scheduling context it
shares with constraints and orderers, and the multi-leg strategies.
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

from circlepairing.scheduling.context import SchedulingContext
from circlepairing.scheduling.legs import (
    ConstraintSatisfiabilityReport,
    LegStrategy,
    MirroredLegStrategy,
    RepeatedLegStrategy,
    ShuffledLegStrategy,
    create_leg_strategy,
)
from circlepairing.scheduling.round_robin import (
    RoundRobinScheduler,
    create_seating,
    generate_circle_rounds,
    rotate_seating,
)

__all__ = [
    "SchedulingContext",
    "ConstraintSatisfiabilityReport",
    "LegStrategy",
    "RepeatedLegStrategy",
    "MirroredLegStrategy",
    "ShuffledLegStrategy",
    "create_leg_strategy",
    "RoundRobinScheduler",
    "create_seating",
    "generate_circle_rounds",
    "rotate_seating",
]
