"""Relation field picker and related-record labels.

The picker only sees a narrow RecordLookup capability and a callback that
writes the chosen id into the form; it never reaches into console state.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from motebase_admin.core.exceptions import ConsoleError
from motebase_admin.core.logging import get_logger
from motebase_admin.domain.entities.collection import Collection, FieldDefinition

logger = get_logger(__name__)

# Probed in order when labelling a related record
DISPLAY_FIELDS = ("name", "title", "label", "email", "username")

# Never used as a label
HIDDEN_FIELDS = frozenset({"id", "created_at", "updated_at", "password_hash"})


class RecordLookup(ABC):
    """Read access to records of other collections."""

    @abstractmethod
    async def lookup(self, collection_name: str, filter: str = "") -> list[dict[str, Any]]:
        """Search a collection's records with an opaque filter expression."""
        ...

    @abstractmethod
    async def get(self, collection_name: str, record_id: Any) -> dict[str, Any]:
        """Fetch one record by id."""
        ...


def record_display_name(record: dict[str, Any] | None) -> str:
    """Human-readable label for a related record."""
    if not record:
        return ""
    for key in DISPLAY_FIELDS:
        if record.get(key):
            return str(record[key])
    for key, value in record.items():
        if key not in HIDDEN_FIELDS and isinstance(value, str):
            return value
    return f"Record #{record.get('id')}"


class RelationPicker:
    """State of the relation widget for one field.

    Args:
        field: The relation field definition.
        lookup: Capability used to search and fetch target records.
        collections: Live collections, used to resolve `collectionId` options.
        on_change: Receives the selected id (or None) to store in the form.
    """

    def __init__(
        self,
        field: FieldDefinition,
        lookup: RecordLookup,
        collections: list[Collection],
        on_change: Callable[[Any], None],
    ) -> None:
        self.field = field
        self.lookup = lookup
        self.collections = collections
        self.on_change = on_change
        self.is_open = False
        self.is_loading = False
        self.search_query = ""
        self.options: list[dict[str, Any]] = []
        self.selected_record: dict[str, Any] | None = None

    @property
    def target_collection(self) -> str | None:
        """Name of the collection the field points at."""
        collection_id = self.field.options.get("collectionId")
        if collection_id:
            for collection in self.collections:
                if collection.id == collection_id:
                    return collection.name
            return None
        return self.field.options.get("collection")

    @property
    def selected_label(self) -> str:
        return record_display_name(self.selected_record)

    async def load_selected(self, record_id: Any) -> None:
        """Fetch the record currently referenced by the field value."""
        collection = self.target_collection
        if not collection or not record_id:
            return
        try:
            self.selected_record = await self.lookup.get(collection, record_id)
        except ConsoleError as e:
            logger.warning(
                "Failed to load related record",
                collection=collection,
                record_id=record_id,
                error=str(e),
            )
            self.selected_record = None

    async def open(self) -> None:
        self.is_open = True
        if not self.options:
            await self.search()

    def close(self) -> None:
        self.is_open = False

    async def search(self, query: str | None = None) -> list[dict[str, Any]]:
        """Search the target collection with the current query."""
        if query is not None:
            self.search_query = query
        collection = self.target_collection
        if not collection:
            return self.options

        self.is_loading = True
        try:
            self.options = await self.lookup.lookup(collection, self.search_query)
        except ConsoleError as e:
            logger.warning("Failed to search records", collection=collection, error=str(e))
            self.options = []
        finally:
            self.is_loading = False
        return self.options

    def select(self, record: dict[str, Any]) -> None:
        self.on_change(record.get("id"))
        self.selected_record = record
        self.is_open = False
        self.search_query = ""

    def clear(self) -> None:
        self.on_change(None)
        self.selected_record = None
        self.search_query = ""
