"""Type hints used in Circle Pairing."""

from typing import List, Optional, Tuple

# Ordered pair of participants, position 0 is home
Pairing = Tuple["Participant", "Participant"]
# One circle seat, None is the bye seat
Seat = Optional["Participant"]
Seating = List[Seat]
# All pairings for one round, in index order
RoundPairings = List[Pairing]

#  LocalWords:  Seating
