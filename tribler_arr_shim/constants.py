"""
Application constants with documented reasoning.

This file centralizes "magic numbers" and fixed protocol strings used
throughout the codebase.
"""

# =============================================================================
# TRIBLER REST API
# =============================================================================

# Header carrying the Tribler API key on every request
TRIBLER_API_KEY_HEADER = "X-Api-Key"

# Total timeout for a single Tribler request. Tribler answers from memory,
# so anything slower than a few seconds means the engine is stuck or gone.
TRIBLER_TIMEOUT_SECONDS = 5.0

# Anonymity hops used when adding a download and none are configured
DEFAULT_ANON_HOPS = 2

# Run states accepted by PATCH /downloads/{infohash}
TRIBLER_STATE_STOP = "stop"
TRIBLER_STATE_RESUME = "resume"
TRIBLER_STATE_RECHECK = "recheck"
TRIBLER_RUN_STATES = frozenset({TRIBLER_STATE_STOP, TRIBLER_STATE_RESUME, TRIBLER_STATE_RECHECK})

# =============================================================================
# QBITTORRENT WEB API EMULATION
# =============================================================================

# Versions reported to Sonarr/Radarr. Both clients gate features on these,
# 4.1.3 / 2.2.8 is the oldest combination they still accept without warnings.
QBITTORRENT_APP_VERSION = "4.1.3"
QBITTORRENT_WEBAPI_VERSION = "2.2.8"

# Session cookie name the *arr clients echo back after login
SESSION_COOKIE_NAME = "SID"

# Keyword accepted in the hashes form field to address every torrent
ALL_HASHES_KEYWORD = "all"

# =============================================================================
# DATABASE
# =============================================================================

# SQLite busy timeout - wait for locks before failing
# 5 seconds handles concurrent handler writes without long hangs
SQLITE_BUSY_TIMEOUT_MS = 5000
