"""
Type definitions used across layers
"""

from enum import StrEnum

# A game never seats more than this, whatever its own max_players bound says.
MIN_PLAYERS = 2
MAX_PLAYERS = 5


class Status(StrEnum):
    PENDING = "pending"
    STARTED = "started"

# Scores and deltas are stored in 32-bit integer columns.
MIN_SCORE = -(2**31)
MAX_SCORE = 2**31 - 1
