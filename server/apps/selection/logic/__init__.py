"""Business logic layer for selection app.

This package contains all business logic for the selection workflow:
- Directory enumeration and the selection set
- Batch copy, move and delete with per-entry error reporting
- Destination name generation
- Per-client session registry

Filesystem access goes through the capabilities defined in
``server.apps.selection.infrastructure.interfaces``.
"""
