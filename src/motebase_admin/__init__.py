"""MoteBase Admin - operator console for a MoteBase server.

Browse and edit collections and records, review collection imports, and
manage settings, logs, jobs and crons over the MoteBase HTTP API.
"""

__version__ = "0.1.0"

from motebase_admin.application.services.console import AdminConsole

__all__ = ["AdminConsole", "__version__"]
