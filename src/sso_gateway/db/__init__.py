"""
sso_gateway.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories backing the
  User Directory and the database Session Store.
"""

# Package marker.
