"""
apim_orchestrator.api

FastAPI application layer.

Responsibilities:
- App factory and composition root.
- HTTP routers exposing gateway reads and API deployment.
"""

# Package marker.
