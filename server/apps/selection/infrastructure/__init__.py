"""Infrastructure layer for selection app.

This package contains integrations with external systems:
- Capability interfaces consumed by the selection engine
- Local filesystem explorer and manipulator
- Django storage (S3/MinIO/R2) explorer and manipulator
- Engine construction for the configured backend

Keep infrastructure concerns separate from business logic.
"""
