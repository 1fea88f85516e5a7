"""
sso_gateway.sessions

Session Store package.

Responsibilities:
- The `SessionStore` interface consumed by the Authenticator and the gateway middleware.
- In-memory and database implementations, selected by `Settings.session_backend`.
"""

# Package marker.
