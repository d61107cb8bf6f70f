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

# --- Constants ---
CONFIG_FILE_EXTENSION = ".json"

# Algorithm identifiers
ALGORITHM_ROUND_ROBIN = "round-robin"
ALGORITHM_ROUND_ROBIN_NAME = "Round Robin"

# Schedule metadata keys
META_ALGORITHM = "algorithm"
META_PARTICIPANT_COUNT = "participant_count"
META_TOTAL_ROUNDS = "total_rounds"
META_ROUNDS_PER_LEG = "rounds_per_leg"
META_LEGS = "legs"
META_LEG_STRATEGY = "leg_strategy"
META_PARTICIPANT_ORDERER = "participant_orderer"
META_SEED = "seed"
META_FULLY_RESOLVED = "fully_resolved"

# Event roles (position 0 is home)
ROLE_HOME = "home"
ROLE_AWAY = "away"

# Participant orderers
ORDERER_STATIC = "static"
ORDERER_ALTERNATING = "alternating"
ORDERER_SEEDED_RANDOM = "seeded_random"
ORDERER_BALANCED = "balanced"
ORDERER_CHOICES = [
    ORDERER_STATIC,
    ORDERER_ALTERNATING,
    ORDERER_SEEDED_RANDOM,
    ORDERER_BALANCED,
]
DEFAULT_ORDERER = ORDERER_STATIC

# Leg strategies
LEG_REPEATED = "repeated"
LEG_MIRRORED = "mirrored"
LEG_SHUFFLED = "shuffled"
LEG_STRATEGY_CHOICES = [LEG_REPEATED, LEG_MIRRORED, LEG_SHUFFLED]
DEFAULT_LEG_STRATEGY = LEG_REPEATED

# Events are pairings
PARTICIPANTS_PER_EVENT = 2
MIN_PARTICIPANTS = 2

# SeededRandom orderer seed components
SEED_ROUND_FACTOR = 10000
SEED_INDEX_FACTOR = 100

# Suggestion thresholds
HIGH_VIOLATION_RATIO = 0.5
MOST_AFFECTED_LIMIT = 3
