"""
apim_orchestrator.domain

Domain package.

Responsibilities:
- Deployment configuration models.
- Azure resource contracts and descriptor builders.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O; clients and services live elsewhere.
