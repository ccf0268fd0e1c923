"""Domain entities for the admin console."""

from motebase_admin.domain.entities.collection import (
    AUTH_COLLECTION,
    BASE_COLLECTION,
    RULE_KEYS,
    Collection,
    FieldDefinition,
    FieldType,
    derive_field_list,
)
from motebase_admin.domain.entities.import_change import (
    Conflict,
    Create,
    DeleteCandidate,
    ImportChange,
    ImportSummary,
    Rename,
    Update,
)
from motebase_admin.domain.entities.record import (
    SYSTEM_FIELDS,
    FileValue,
    StagedFile,
    strip_system_fields,
)
from motebase_admin.domain.entities.route import (
    DASHBOARD,
    NEW_RECORD_ID,
    RouteDescriptor,
    RouteName,
)

__all__ = [
    "AUTH_COLLECTION",
    "BASE_COLLECTION",
    "RULE_KEYS",
    "Collection",
    "FieldDefinition",
    "FieldType",
    "derive_field_list",
    "Conflict",
    "Create",
    "DeleteCandidate",
    "ImportChange",
    "ImportSummary",
    "Rename",
    "Update",
    "SYSTEM_FIELDS",
    "FileValue",
    "StagedFile",
    "strip_system_fields",
    "DASHBOARD",
    "NEW_RECORD_ID",
    "RouteDescriptor",
    "RouteName",
]
