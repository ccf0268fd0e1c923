"""List view state: filtering, sorting, pagination and bulk selection."""

from dataclasses import dataclass, field
from typing import Any

from motebase_admin.domain.entities.collection import Collection, FieldDefinition

SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass
class RecordListState:
    """State of the record list of one collection.

    The filter expression is passed to the store untouched. Selection only
    ever holds ids present on the current page, in the order they were
    selected.
    """

    per_page: int = 20
    page: int = 1
    total_pages: int = 1
    total_items: int = 0
    filter_query: str = ""
    sort_field: str = ""
    sort_direction: str = ""
    items: list[dict[str, Any]] = field(default_factory=list)
    selected_ids: list[Any] = field(default_factory=list)

    def reset(self) -> None:
        """Return to page 1 with no filter, sort, items or selection."""
        self.page = 1
        self.total_pages = 1
        self.total_items = 0
        self.filter_query = ""
        self.sort_field = ""
        self.sort_direction = ""
        self.items = []
        self.selected_ids = []

    # Sorting

    def toggle_sort(self, field_name: str) -> None:
        """Cycle sorting on a column: ascending, descending, unsorted.

        Clicking a different column starts it at ascending. Every click
        returns to page 1.
        """
        if self.sort_field == field_name:
            if self.sort_direction == SORT_ASC:
                self.sort_direction = SORT_DESC
            elif self.sort_direction == SORT_DESC:
                self.sort_field = ""
                self.sort_direction = ""
        else:
            self.sort_field = field_name
            self.sort_direction = SORT_ASC
        self.page = 1

    def sort_indicator(self, field_name: str) -> str:
        if self.sort_field != field_name:
            return ""
        return "▲" if self.sort_direction == SORT_ASC else "▼"

    @property
    def sort_param(self) -> str | None:
        if not self.sort_field:
            return None
        if self.sort_direction == SORT_DESC:
            return f"-{self.sort_field}"
        return self.sort_field

    def set_filter(self, query: str) -> None:
        self.filter_query = query
        self.page = 1

    def query_params(self) -> dict[str, Any]:
        """Query string parameters for the record list endpoint."""
        params: dict[str, Any] = {"page": self.page, "perPage": self.per_page}
        if self.filter_query:
            params["filter"] = self.filter_query
        if self.sort_param:
            params["sort"] = self.sort_param
        return params

    # Pagination

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    def previous_page(self) -> bool:
        """Step back one page; returns False when already on the first."""
        if not self.has_previous_page:
            return False
        self.page -= 1
        return True

    def next_page(self) -> bool:
        """Step forward one page; returns False when already on the last."""
        if not self.has_next_page:
            return False
        self.page += 1
        return True

    def apply_page(self, items: list[dict[str, Any]], total_pages: int | None, total_items: int | None) -> None:
        """Adopt a freshly loaded page; the selection starts empty."""
        self.items = list(items)
        self.total_pages = total_pages or 1
        self.total_items = total_items or len(self.items)
        self.selected_ids = []

    # Selection

    @property
    def page_ids(self) -> list[Any]:
        return [item.get("id") for item in self.items]

    def is_selected(self, record_id: Any) -> bool:
        return record_id in self.selected_ids

    def toggle_selection(self, record_id: Any) -> bool:
        """Flip selection of a record on the current page.

        Returns:
            True if the id is selected afterwards. Ids not on the page are
            never selected.
        """
        if record_id in self.selected_ids:
            self.selected_ids.remove(record_id)
            return False
        if record_id not in self.page_ids:
            return False
        self.selected_ids.append(record_id)
        return True

    @property
    def all_selected(self) -> bool:
        return bool(self.items) and len(self.selected_ids) == len(self.items)

    @property
    def some_selected(self) -> bool:
        return 0 < len(self.selected_ids) < len(self.items)

    def toggle_select_all(self) -> None:
        if self.all_selected:
            self.selected_ids = []
        else:
            self.selected_ids = self.page_ids

    def clear_selection(self) -> None:
        self.selected_ids = []


def visible_fields(collection: Collection | None, limit: int = 5) -> list[FieldDefinition]:
    """Leading schema fields shown as list columns."""
    if collection is None:
        return []
    return collection.fields[:limit]


@dataclass
class CollectionBrowser:
    """Searchable, paginated collection overview on the dashboard."""

    per_page: int = 12
    query: str = ""
    page: int = 1

    def search(self, query: str) -> None:
        self.query = query
        self.page = 1

    def filtered(self, collections: list[Collection]) -> list[Collection]:
        """Collections whose name or type contains the search text."""
        query = self.query.strip().lower()
        if not query:
            return list(collections)
        return [
            c for c in collections
            if query in c.name.lower() or query in (c.type or "base").lower()
        ]

    def total_pages(self, collections: list[Collection]) -> int:
        count = len(self.filtered(collections))
        return max(1, -(-count // self.per_page))

    def page_items(self, collections: list[Collection]) -> list[Collection]:
        start = (self.page - 1) * self.per_page
        return self.filtered(collections)[start:start + self.per_page]
