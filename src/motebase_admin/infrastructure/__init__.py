"""Infrastructure layer - External dependencies and implementations.

This layer contains all external dependencies including:
- HTTP access to the MoteBase API (httpx)
- The persisted operator session
- Terminal prompts and notifications (click)

The infrastructure layer implements interfaces defined in the
domain layer.
"""

from motebase_admin.infrastructure.api.client import ClientRecordLookup, MoteBaseClient
from motebase_admin.infrastructure.persistence.session_store import SessionStore

__all__ = [
    "ClientRecordLookup",
    "MoteBaseClient",
    "SessionStore",
]
