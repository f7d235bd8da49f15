"""HTTP surface for the caller API.

The application factory lives in agentforms.api.app; importing this package
does not build the app.
"""
