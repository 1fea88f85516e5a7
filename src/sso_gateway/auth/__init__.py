"""
sso_gateway.auth

Authentication package.

Responsibilities:
- Identity and session value types.
- Password hashing.
- The Authenticator (login/logout/current user/session check).
- FastAPI dependencies resolving the caller's session from its cookie.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here reads ambient request state; the session is always passed explicitly.
