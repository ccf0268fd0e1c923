"""Domain services for the admin console.

Services hold the console's behaviour: navigation, record editing,
list state, relation lookup and collection reconciliation. They have no
dependencies on HTTP or terminal code.
"""

from motebase_admin.domain.services.collection_editor import CollectionEditor
from motebase_admin.domain.services.collection_validator import (
    RESERVED_FIELD_NAMES,
    CollectionValidationError,
    CollectionValidator,
)
from motebase_admin.domain.services.field_kinds import (
    FIELD_KINDS,
    FieldKind,
    RecordValidationError,
    Widget,
    display_value,
    kind_for,
)
from motebase_admin.domain.services.interaction import (
    ConfirmationProvider,
    LoggingNotifier,
    Notifier,
    StaticConfirmation,
)
from motebase_admin.domain.services.navigation import (
    NavigationGuard,
    NavigationOutcome,
    parse_route,
)
from motebase_admin.domain.services.reconciliation import (
    ImportSession,
    compute_import_changes,
    export_filename,
    has_conflicts,
    parse_import_document,
    summarize,
)
from motebase_admin.domain.services.record_form import RecordForm, WritePayload
from motebase_admin.domain.services.record_list import (
    CollectionBrowser,
    RecordListState,
    visible_fields,
)
from motebase_admin.domain.services.record_validator import RecordValidator
from motebase_admin.domain.services.relation_resolver import (
    RecordLookup,
    RelationPicker,
    record_display_name,
)

__all__ = [
    "CollectionEditor",
    "RESERVED_FIELD_NAMES",
    "CollectionValidationError",
    "CollectionValidator",
    "FIELD_KINDS",
    "FieldKind",
    "RecordValidationError",
    "Widget",
    "display_value",
    "kind_for",
    "ConfirmationProvider",
    "LoggingNotifier",
    "Notifier",
    "StaticConfirmation",
    "NavigationGuard",
    "NavigationOutcome",
    "parse_route",
    "ImportSession",
    "compute_import_changes",
    "export_filename",
    "has_conflicts",
    "parse_import_document",
    "summarize",
    "RecordForm",
    "WritePayload",
    "CollectionBrowser",
    "RecordListState",
    "visible_fields",
    "RecordValidator",
    "RecordLookup",
    "RelationPicker",
    "record_display_name",
]
