"""Change entries produced when reconciling an imported collection set.

Each entry is an immutable value. The `kind` class attribute is the
discriminator shown to operators and used when summarizing a change set.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class Create:
    """Imported collection with an id and name unknown to the live set."""

    kind: ClassVar[str] = "create"

    name: str
    id: Any
    field_count: int


@dataclass(frozen=True)
class Update:
    """Imported collection whose schema and/or rules differ from the live one."""

    kind: ClassVar[str] = "update"

    name: str
    id: Any
    schema_changed: bool
    rules_changed: bool


@dataclass(frozen=True)
class Rename:
    """Imported collection whose id is live under a different name."""

    kind: ClassVar[str] = "rename"

    name: str
    old_name: str
    id: Any


@dataclass(frozen=True)
class Conflict:
    """Imported collection whose name is owned by a different live id."""

    kind: ClassVar[str] = "conflict"

    name: str
    reason: str


@dataclass(frozen=True)
class DeleteCandidate:
    """Live collection missing from the import; removed only on opt-in."""

    kind: ClassVar[str] = "delete"

    name: str
    id: Any


ImportChange = Union[Create, Update, Rename, Conflict, DeleteCandidate]


@dataclass(frozen=True)
class ImportSummary:
    """Counts shown to the operator before applying an import."""

    creates: int = 0
    updates: int = 0
    renames: int = 0
    deletes: int = 0
    conflicts: int = 0
