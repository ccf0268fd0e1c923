"""Console application state.

All mutable console state lives in one ConsoleState owned by the console's
single event loop. Derived parts (record pages, import changes) are always
recomputed in full and then swapped in.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from motebase_admin.core.exceptions import ConsoleBusyError
from motebase_admin.domain.entities.collection import Collection
from motebase_admin.domain.services.collection_editor import CollectionEditor
from motebase_admin.domain.services.reconciliation import ImportSession
from motebase_admin.domain.services.record_form import RecordForm
from motebase_admin.domain.services.record_list import CollectionBrowser, RecordListState
from motebase_admin.infrastructure.api.schemas import ListPage


@dataclass
class ManagementState:
    """Data shown by the settings, logs, jobs and crons views."""

    settings_data: dict[str, Any] | None = None
    settings_changed: bool = False

    logs_page: int = 1
    logs_filter: dict[str, str] = field(
        default_factory=lambda: {"status": "", "method": "", "path": ""}
    )
    logs_data: ListPage = field(default_factory=ListPage)
    logs_stats: dict[str, Any] | None = None

    jobs_page: int = 1
    jobs_filter: dict[str, str] = field(default_factory=lambda: {"status": "", "name": ""})
    jobs_data: ListPage = field(default_factory=ListPage)
    jobs_stats: dict[str, Any] | None = None

    crons: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ConsoleState:
    """Everything the console shows and edits.

    Attributes:
        busy: Set while a mutating operation is in flight; a second mutating
            operation is refused until it clears.
    """

    auth_token: str | None = None
    current_user: dict[str, Any] | None = None
    collections: list[Collection] = field(default_factory=list)
    records: RecordListState = field(default_factory=RecordListState)
    form: RecordForm = field(default_factory=RecordForm)
    browser: CollectionBrowser = field(default_factory=CollectionBrowser)
    editor: CollectionEditor = field(default_factory=CollectionEditor)
    import_session: ImportSession | None = None
    management: ManagementState = field(default_factory=ManagementState)
    busy: bool = False

    def find_collection(self, name: str | None) -> Collection | None:
        for collection in self.collections:
            if collection.name == name:
                return collection
        return None


@asynccontextmanager
async def busy_guard(state: ConsoleState, operation: str) -> AsyncIterator[None]:
    """Hold the shared busy flag for the duration of a mutating operation.

    Raises:
        ConsoleBusyError: If another operation already holds the flag.
    """
    if state.busy:
        raise ConsoleBusyError(f"Cannot {operation} while another operation is in progress")
    state.busy = True
    try:
        yield
    finally:
        state.busy = False
