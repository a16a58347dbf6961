"""
apim_orchestrator.auth

Authentication/authorization package.

Responsibilities:
- JWT issuing/validation for callers of the deployment API.
- FastAPI auth dependencies (Principal + role checks).
"""

# Package marker.
