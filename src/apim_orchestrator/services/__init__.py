"""
apim_orchestrator.services

Service layer.

Responsibilities:
- The APIM deployment orchestrator (core).
- The end-to-end deploy flow and composition helpers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on client protocols, never on FastAPI.
