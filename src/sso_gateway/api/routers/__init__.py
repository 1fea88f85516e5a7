"""
sso_gateway.api.routers

Router modules mounted by `sso_gateway.api.app.create_app`.
"""

# Package marker.
