"""
sso_gateway.directory

User Directory package.

Responsibilities:
- The `UserDirectory` interface consumed by the Authenticator.
- A SQL-backed implementation and demo-account seeding.
"""

# Package marker.
