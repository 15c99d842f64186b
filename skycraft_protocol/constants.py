"""Fixed values that client and server agree on."""

from typing import Final

# Connection handshake
PROTOCOL_VERSION: Final = 1
DEFAULT_PORT: Final = 35565

# Framing: the largest payload accepted after the length prefix.
MAX_PACKET_SIZE: Final = 1 << 20

# Simulation timing
TICKS_PER_SECOND: Final = 20
MS_PER_TICK: Final = 1000 // TICKS_PER_SECOND

# Chunk streaming radius, measured in chunks
DEFAULT_VIEW_DISTANCE: Final = 8
MAX_VIEW_DISTANCE: Final = 32

# Liveness checks, in seconds: how often a ping goes out and how long
# the peer may stay silent before it is dropped.
KEEP_ALIVE_INTERVAL_SECS: Final = 15
KEEP_ALIVE_TIMEOUT_SECS: Final = 2 * KEEP_ALIVE_INTERVAL_SECS

# Text limits, counted in characters
MAX_CHAT_LENGTH: Final = 256
MIN_NICKNAME_LENGTH: Final = 3
MAX_NICKNAME_LENGTH: Final = 16