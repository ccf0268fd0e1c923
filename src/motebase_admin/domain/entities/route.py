"""Route descriptors for console navigation."""

from dataclasses import dataclass
from enum import Enum


class RouteName(str, Enum):
    """Views the console can display."""

    DASHBOARD = "dashboard"
    COLLECTION = "collection"
    RECORD = "record"
    SETTINGS = "settings"
    LOGS = "logs"
    JOBS = "jobs"
    CRONS = "crons"
    LOGIN = "login"


# Record id segment that opens the editor for a new record
NEW_RECORD_ID = "new"


@dataclass(frozen=True)
class RouteDescriptor:
    """Typed result of parsing a route token.

    Attributes:
        name: View selected by the token.
        token: Normalized path the descriptor was parsed from.
        collection_name: Collection for collection/record views.
        record_id: Record id, or "new", for the record view.
        error: Set when the token named a collection that does not exist.
    """

    name: RouteName
    token: str = "/"
    collection_name: str | None = None
    record_id: str | None = None
    error: str | None = None

    @property
    def is_record_editor(self) -> bool:
        return self.name == RouteName.RECORD

    @property
    def is_new_record(self) -> bool:
        return self.record_id == NEW_RECORD_ID


DASHBOARD = RouteDescriptor(RouteName.DASHBOARD)
