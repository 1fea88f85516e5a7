"""
sso_gateway.proxy

Backend proxy package.

Responsibilities:
- Forward classified requests to Route Rule backends with trust headers injected.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The gateway middleware depends on this boundary, not on httpx directly.
