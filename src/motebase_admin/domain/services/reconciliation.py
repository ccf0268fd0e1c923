"""Reconciliation of imported collection definitions against the live set.

The id is the stable join key; the name is the mutable, human-visible key.
Classification is a pure function of the two inputs and is recomputed in
full whenever either side changes. Nothing here performs a write: applying
an import is a single batch request owned by the store.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from motebase_admin.core.exceptions import ImportConflictError, ImportFormatError
from motebase_admin.core.logging import get_logger
from motebase_admin.domain.entities.collection import RULE_KEYS, Collection
from motebase_admin.domain.entities.import_change import (
    Conflict,
    Create,
    DeleteCandidate,
    ImportChange,
    ImportSummary,
    Rename,
    Update,
)

logger = get_logger(__name__)

NAME_CONFLICT_REASON = "Name already used by another collection"


def parse_import_document(text: str) -> list[dict[str, Any]]:
    """Parse an import file into a list of collection documents.

    Raises:
        ImportFormatError: If the text is not JSON or not a JSON array.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Invalid JSON: {e}") from e
    if not isinstance(parsed, list) or not all(isinstance(doc, dict) for doc in parsed):
        raise ImportFormatError("Invalid format: expected an array of collections")
    for doc in parsed:
        try:
            Collection.from_dict(doc)
        except ValueError as e:
            raise ImportFormatError(f"Invalid collection '{doc.get('name', '')}': {e}") from e
    return parsed


def _rules_differ(live: Collection, candidate: Collection) -> bool:
    # null and "" both mean "no rule"
    return any(
        (getattr(live, attr) or "") != (getattr(candidate, attr) or "")
        for attr in RULE_KEYS.values()
    )


def compute_import_changes(
    live: Iterable[Collection], candidates: Iterable[Collection]
) -> list[ImportChange]:
    """Classify every candidate and every live collection.

    Args:
        live: Collections currently in the store.
        candidates: Collections parsed from the import document.

    Returns:
        Candidate classifications in input order, followed by one
        DeleteCandidate per live collection whose id is not imported.
        Unchanged candidates produce no entry.
    """
    live = list(live)
    candidates = list(candidates)

    live_by_id = {c.id: c for c in live}
    live_by_name = {c.name: c for c in live}
    imported_ids = {c.id for c in candidates}

    changes: list[ImportChange] = []

    for candidate in candidates:
        existing = live_by_id.get(candidate.id)

        if existing is not None:
            if existing.name != candidate.name:
                changes.append(Rename(name=candidate.name, old_name=existing.name, id=candidate.id))
                continue

            schema_changed = existing.schema != candidate.schema
            rules_changed = _rules_differ(existing, candidate)
            if schema_changed or rules_changed:
                changes.append(
                    Update(
                        name=candidate.name,
                        id=candidate.id,
                        schema_changed=schema_changed,
                        rules_changed=rules_changed,
                    )
                )
        elif candidate.name in live_by_name:
            changes.append(Conflict(name=candidate.name, reason=NAME_CONFLICT_REASON))
        else:
            changes.append(
                Create(name=candidate.name, id=candidate.id, field_count=len(candidate.schema or {}))
            )

    for collection in live:
        if collection.id not in imported_ids:
            changes.append(DeleteCandidate(name=collection.name, id=collection.id))

    return changes


def has_conflicts(changes: Iterable[ImportChange]) -> bool:
    return any(isinstance(change, Conflict) for change in changes)


def summarize(changes: Iterable[ImportChange], delete_missing: bool) -> ImportSummary:
    """Count changes by kind; deletions only count when opted in."""
    changes = list(changes)
    deletes = sum(isinstance(c, DeleteCandidate) for c in changes)
    return ImportSummary(
        creates=sum(isinstance(c, Create) for c in changes),
        updates=sum(isinstance(c, Update) for c in changes),
        renames=sum(isinstance(c, Rename) for c in changes),
        deletes=deletes if delete_missing else 0,
        conflicts=sum(isinstance(c, Conflict) for c in changes),
    )


def export_filename(today: date | None = None) -> str:
    """Default file name for an export taken today."""
    today = today or date.today()
    return f"motebase_collections_{today.isoformat()}.json"


@dataclass
class ImportSession:
    """Review state of one import, from file selection to apply.

    Attributes:
        documents: Collection documents exactly as read from the file; these
            are what gets submitted.
        changes: Classification against the live set.
        delete_missing: Operator opt-in to removing live collections that
            the import does not mention.
        error: Inline message for the import dialog.
    """

    documents: list[dict[str, Any]] | None = None
    changes: list[ImportChange] = field(default_factory=list)
    delete_missing: bool = False
    error: str = ""

    def load_text(self, text: str, live: list[Collection]) -> None:
        """Parse an import file and classify it.

        A malformed document clears any previously loaded one and leaves the
        message in `error` before re-raising.
        """
        try:
            self.documents = parse_import_document(text)
        except ImportFormatError as e:
            self.documents = None
            self.changes = []
            self.error = e.message
            raise
        self.error = ""
        self.recompute(live)

    def recompute(self, live: list[Collection]) -> None:
        """Rebuild the change list from scratch."""
        if self.documents is None:
            self.changes = []
            return
        candidates = [Collection.from_dict(doc) for doc in self.documents]
        self.changes = compute_import_changes(live, candidates)
        logger.debug("Import changes computed", count=len(self.changes))

    @property
    def has_conflicts(self) -> bool:
        return has_conflicts(self.changes)

    @property
    def summary(self) -> ImportSummary:
        return summarize(self.changes, self.delete_missing)

    def ensure_applicable(self) -> None:
        """Refuse to apply while nothing is loaded or conflicts remain.

        Raises:
            ImportConflictError: If applying must not proceed.
        """
        if self.documents is None:
            raise ImportConflictError("No import loaded")
        if self.has_conflicts:
            conflicts = [c.name for c in self.changes if isinstance(c, Conflict)]
            raise ImportConflictError(
                f"Resolve name conflicts before importing: {', '.join(conflicts)}"
            )

    def request_body(self) -> dict[str, Any]:
        return {"collections": self.documents, "deleteMissing": self.delete_missing}
