"""SOS alert policy constants."""

from __future__ import annotations

# Radii for the nearby-services search: 2 km, then 7 km, then 12 km
SERVICE_RADII_M: tuple[int, ...] = (2000, 7000, 12000)

# Maximum service locations notified per alert
MAX_SERVICE_TARGETS = 3

# Safety cap on raw rows pulled from a bounding-box query
BOUNDING_BOX_RAW_CAP = 200

# Radii for the nearby-users search (native index; one pass is usually enough)
NEARBY_USER_RADII_M: tuple[int, ...] = (8000,)

# Default / ceiling for nearby users notified per alert
DEFAULT_MAX_NEARBY_USERS = 3
MAX_NEARBY_USERS_CEILING = 10

# A user's stored location older than this is not trusted for "nearby"
DEFAULT_FRESHNESS_MINUTES = 10
# Longest freshness window a caller may ask for (one week)
MAX_FRESHNESS_MINUTES = 60 * 24 * 7

# Personal SOS contacts per user
MAX_SOS_CONTACTS = 5
