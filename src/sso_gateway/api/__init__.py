"""
sso_gateway.api

API package for the SSO gateway.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request/response models and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + session resolution + delegation
# to the Authenticator.
