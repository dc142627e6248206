"""FastAPI server adapter for lawflow.

Design intent:
- Keep business logic in `lawflow.workflow.*`
- Keep server-specific concerns (routing, tenancy header, CORS) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from lawflow.server.app import create_app
