"""API module for cachebench.

API layer:
- Validates inputs, drives the session controller
- Returns payloads for UI
- Forbidden: statistics computation, direct origin calls
"""
