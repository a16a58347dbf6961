"""
apim_orchestrator.azure_clients

Azure Resource Manager client boundary.

Responsibilities:
- ARM transport (auth, api-version, error mapping).
- Per-resource-kind clients for API Management and Function Apps.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator depends on `azure_clients.protocols` only; concrete clients are
# wired in `services.factory`.
