"""
sso_gateway.routing

Request-routing decision engine.

Responsibilities:
- Route Rule configuration model and the immutable Route Table.
- The Route Classifier (static asset / SPA fallback / proxy / reject).
- The gateway middleware that carries out each classification.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The classifier is pure and synchronous apart from filesystem checks; all I/O with
# collaborators (session lookup, backend calls) happens in the middleware.
