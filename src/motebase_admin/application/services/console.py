"""Admin console orchestration.

AdminConsole ties the domain services to the REST client: it owns the single
ConsoleState, runs the route side effects, and turns API failures into
operator notifications while leaving local state as it was.
"""

import json
from typing import Any

from motebase_admin.application.services.operations import ManagementViews
from motebase_admin.application.services.state import ConsoleState, busy_guard
from motebase_admin.core.config import Settings, get_settings
from motebase_admin.core.exceptions import (
    ApiError,
    ConsoleError,
    ImportConflictError,
    ImportFormatError,
    LocalValidationError,
)
from motebase_admin.core.logging import LoggingContext, bind_operator, clear_context, get_logger
from motebase_admin.domain.entities.collection import Collection, FieldDefinition
from motebase_admin.domain.entities.route import RouteDescriptor, RouteName
from motebase_admin.domain.services.collection_editor import CollectionEditor
from motebase_admin.domain.services.interaction import (
    ConfirmationProvider,
    LoggingNotifier,
    Notifier,
    StaticConfirmation,
)
from motebase_admin.domain.services.navigation import NavigationGuard, NavigationOutcome
from motebase_admin.domain.services.reconciliation import ImportSession, export_filename
from motebase_admin.domain.services.record_form import RecordForm
from motebase_admin.domain.services.record_list import (
    CollectionBrowser,
    RecordListState,
    visible_fields,
)
from motebase_admin.domain.services.relation_resolver import RelationPicker
from motebase_admin.infrastructure.api.client import ClientRecordLookup, MoteBaseClient
from motebase_admin.infrastructure.persistence.session_store import SessionStore

logger = get_logger(__name__)


def bulk_delete_prompt(count: int) -> str:
    noun = "record" if count == 1 else "records"
    return f"Are you sure you want to delete {count} {noun}? This cannot be undone."


def collection_delete_prompt(name: str) -> str:
    return (
        f'Are you sure you want to delete the "{name}" collection? '
        "This will delete ALL records and cannot be undone."
    )


RECORD_DELETE_PROMPT = "Are you sure you want to delete this record?"


class AdminConsole:
    """The operator console.

    Args:
        client: REST client for the MoteBase API.
        session_store: Where the token and profile persist between runs.
        confirm: Asked before destructive actions and before discarding edits.
        notifier: Receives operator-visible messages.
        settings: Console settings (defaults to the cached environment settings).
    """

    def __init__(
        self,
        client: MoteBaseClient,
        session_store: SessionStore | None = None,
        confirm: ConfirmationProvider | None = None,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client
        self.session_store = session_store
        self.confirm = confirm or StaticConfirmation(False)
        self.notifier = notifier or LoggingNotifier()

        self.state = ConsoleState(
            records=RecordListState(per_page=self.settings.records_per_page),
            browser=CollectionBrowser(per_page=self.settings.collections_per_page),
        )
        self.guard = NavigationGuard(
            is_dirty=lambda: self.state.form.is_dirty(),
            confirm=self.confirm,
            notifier=self.notifier,
            collection_names=lambda: [c.name for c in self.state.collections],
        )
        self.operations = ManagementViews(
            self.state,
            client,
            self.confirm,
            self.notifier,
            per_page=self.settings.records_per_page,
        )

    # Derived views

    @property
    def is_authenticated(self) -> bool:
        return bool(self.state.auth_token)

    @property
    def route(self) -> RouteDescriptor:
        return self.guard.current

    @property
    def current_collection(self) -> Collection | None:
        return self.state.find_collection(self.route.collection_name)

    @property
    def is_auth_collection(self) -> bool:
        collection = self.current_collection
        return collection is not None and collection.is_auth

    def editable_fields(self) -> list[FieldDefinition]:
        collection = self.current_collection
        return collection.fields if collection is not None else []

    def visible_fields(self) -> list[FieldDefinition]:
        return visible_fields(self.current_collection, self.settings.max_visible_fields)

    def has_unsaved_changes(self) -> bool:
        return self.guard.has_unsaved_changes()

    # Session

    async def restore_session(self) -> bool:
        """Resume a persisted session, loading collections when a token exists."""
        if self.session_store is None:
            return False
        token, user = self.session_store.load()
        if not token:
            return False
        self._adopt_session(token, user)
        await self.load_collections()
        return True

    def _adopt_session(self, token: str, user: dict[str, Any] | None) -> None:
        self.state.auth_token = token
        self.state.current_user = user
        self.client.token = token
        bind_operator((user or {}).get("email"))

    async def login(self, email: str, password: str) -> bool:
        """Exchange credentials for a token and open the dashboard."""
        if not email or not password:
            self.notifier.error("Email and password are required")
            return False

        async with busy_guard(self.state, "log in"):
            try:
                response = await self.client.login(email, password)
            except ApiError as e:
                self.notifier.error(e.message)
                return False

            self._adopt_session(response.token, response.user)
            if self.session_store is not None:
                self.session_store.save(response.token, response.user)
            logger.info("Operator logged in")

        await self.load_collections()
        await self._go("/")
        return True

    async def logout(self) -> None:
        """Forget the token and profile and return to the login view."""
        logger.info("Operator logged out")
        self.state.auth_token = None
        self.state.current_user = None
        self.state.collections = []
        self.state.records.reset()
        self.state.form = RecordForm()
        self.state.import_session = None
        self.client.token = None
        if self.session_store is not None:
            self.session_store.clear()
        clear_context()
        self.guard.force("/login")

    # Collections

    async def load_collections(self) -> None:
        try:
            documents = await self.client.list_collections()
        except ApiError as e:
            self.notifier.error(e.message)
            return
        self.state.collections = [Collection.from_dict(doc) for doc in documents]
        logger.debug("Collections loaded", count=len(self.state.collections))
        if self.state.import_session is not None:
            self.state.import_session.recompute(self.state.collections)

    def dashboard_collections(self) -> list[Collection]:
        return self.state.browser.page_items(self.state.collections)

    # Navigation

    async def navigate(self, token: str) -> NavigationOutcome:
        """Move to a route, asking first when unsaved record edits would be lost."""
        outcome = self.guard.request(token)
        if outcome.accepted:
            await self._enter(outcome.route)
        return outcome

    async def _go(self, token: str) -> NavigationOutcome:
        outcome = self.guard.force(token)
        await self._enter(outcome.route)
        return outcome

    async def _enter(self, route: RouteDescriptor) -> None:
        try:
            await self._load_route(route)
        except ConsoleError as e:
            logger.warning("Failed to open route", route=route.token, error=str(e))
            self.state.form = RecordForm()
            self.notifier.error(str(e))
            self.guard.force("/")

    async def _load_route(self, route: RouteDescriptor) -> None:
        if route.name == RouteName.COLLECTION:
            self.state.records.reset()
            await self.load_records()
        elif route.name == RouteName.RECORD:
            await self.load_record_for_edit()
        elif route.name == RouteName.SETTINGS:
            await self.operations.load_settings()
        elif route.name == RouteName.LOGS:
            self.state.management.logs_page = 1
            await self.operations.load_logs()
            await self.operations.load_logs_stats()
        elif route.name == RouteName.JOBS:
            self.state.management.jobs_page = 1
            await self.operations.load_jobs()
            await self.operations.load_jobs_stats()
        elif route.name == RouteName.CRONS:
            await self.operations.load_crons()
        elif route.name == RouteName.LOGIN and self.is_authenticated:
            self.guard.force("/")

    # Record list

    async def load_records(self) -> None:
        """Fetch the current page of the current collection."""
        collection = self.current_collection
        if collection is None:
            return
        records = self.state.records
        try:
            page = await self.client.list_records(collection.name, records.query_params())
        except ApiError as e:
            self.notifier.error(e.message)
            records.apply_page([], records.total_pages, records.total_items)
            return
        records.apply_page(page.items, page.total_pages, page.total_items)

    async def next_page(self) -> None:
        if self.state.records.next_page():
            await self.load_records()

    async def previous_page(self) -> None:
        if self.state.records.previous_page():
            await self.load_records()

    async def toggle_sort(self, field_name: str) -> None:
        self.state.records.toggle_sort(field_name)
        await self.load_records()

    async def apply_filter(self, query: str) -> None:
        self.state.records.set_filter(query)
        await self.load_records()

    # Record editor

    async def load_record_for_edit(self) -> None:
        """Prepare the form for the record named by the current route."""
        route = self.route
        fields = self.editable_fields()
        form = self.state.form
        if route.is_new_record:
            form.load_new(fields)
            return
        try:
            record = await self.client.get_record(route.collection_name, route.record_id)
        except ApiError as e:
            self.notifier.error(e.message)
            form.load_new(fields)
            return
        form.load_existing(record or {}, fields)

    def file_url(self, field_name: str) -> str:
        """Download URL of the file currently attached to a field ("" if none)."""
        existing = self.state.form.existing_file(field_name)
        route = self.route
        if existing is None or route.is_new_record or not route.collection_name:
            return ""
        return self.client.file_url(route.collection_name, route.record_id, existing.filename)

    async def relation_picker(self, field_name: str) -> RelationPicker:
        """Build the picker for a relation field and resolve its current value."""
        form = self.state.form
        field = form.get_field(field_name)
        if field is None:
            raise LocalValidationError(f"Unknown field: {field_name}")

        def on_change(value: Any) -> None:
            form.set_value(field_name, value)

        picker = RelationPicker(
            field,
            ClientRecordLookup(self.client, self.settings.relation_page_size),
            self.state.collections,
            on_change,
        )
        await picker.load_selected(form.values.get(field_name))
        return picker

    async def save_record(self) -> bool:
        """Write the form to the server, then return to the collection's list."""
        route = self.route
        collection = self.current_collection
        if not route.is_record_editor or collection is None:
            return False

        form = self.state.form
        async with busy_guard(self.state, "save record"):
            with LoggingContext(collection=collection.name, record_id=route.record_id):
                try:
                    form.validate_passwords(collection.is_auth)
                    form.validate_values()
                except LocalValidationError as e:
                    self.notifier.error(e.message)
                    return False

                payload = form.serialize_for_save(collection.is_auth)
                try:
                    if route.is_new_record:
                        await self.client.create_record(collection.name, payload)
                    else:
                        await self.client.update_record(collection.name, route.record_id, payload)
                except ApiError as e:
                    self.notifier.error(e.message)
                    return False

                form.mark_saved()
                logger.info("Record saved", multipart=payload.is_multipart)

        self.notifier.success("Record saved")
        await self._go(f"/collections/{collection.name}")
        return True

    async def delete_record(self, record_id: Any) -> bool:
        collection = self.current_collection
        if collection is None:
            return False
        if not self.confirm.confirm(RECORD_DELETE_PROMPT):
            return False

        async with busy_guard(self.state, "delete record"):
            try:
                await self.client.delete_record(collection.name, record_id)
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            logger.info("Record deleted", collection=collection.name, record_id=record_id)

        if self.route.is_record_editor:
            self.state.form.mark_saved()
            await self._go(f"/collections/{collection.name}")
        else:
            await self.load_records()
        return True

    async def bulk_delete(self) -> int:
        """Delete every selected record, one request at a time.

        A failure stops the run; records already deleted stay deleted and
        the list is refreshed either way.

        Returns:
            Number of records deleted.
        """
        collection = self.current_collection
        ids = list(self.state.records.selected_ids)
        if collection is None or not ids:
            return 0
        if not self.confirm.confirm(bulk_delete_prompt(len(ids))):
            return 0

        deleted = 0
        async with busy_guard(self.state, "delete records"):
            with LoggingContext(collection=collection.name):
                for record_id in ids:
                    try:
                        await self.client.delete_record(collection.name, record_id)
                    except ApiError as e:
                        self.notifier.error(e.message)
                        break
                    deleted += 1
                logger.info("Bulk delete finished", requested=len(ids), deleted=deleted)

        self.state.records.clear_selection()
        await self.load_records()
        return deleted

    # Collection editor

    def open_collection_editor(self, collection: Collection | None = None) -> CollectionEditor:
        self.state.editor = CollectionEditor.open(collection)
        return self.state.editor

    def close_collection_editor(self) -> None:
        self.state.editor = CollectionEditor()

    async def save_collection(self) -> bool:
        editor = self.state.editor
        editor.error = ""
        try:
            body = editor.build_request_body()
        except LocalValidationError as e:
            editor.error = e.message
            return False

        async with busy_guard(self.state, "save collection"):
            try:
                if editor.editing is None:
                    await self.client.create_collection(body)
                else:
                    await self.client.update_collection(editor.editing.name, body)
            except ApiError as e:
                editor.error = e.message
                return False
            logger.info("Collection saved", collection=body["name"], created=editor.is_new)

        await self.load_collections()
        self.close_collection_editor()
        return True

    async def delete_collection(self) -> bool:
        editor = self.state.editor
        if editor.editing is None:
            return False
        name = editor.editing.name
        if not self.confirm.confirm(collection_delete_prompt(name)):
            return False

        async with busy_guard(self.state, "delete collection"):
            try:
                await self.client.delete_collection(name)
            except ApiError as e:
                editor.error = e.message
                return False
            logger.info("Collection deleted", collection=name)

        self.close_collection_editor()
        await self.load_collections()
        if self.route.collection_name == name:
            await self._go("/")
        return True

    # Import / export

    async def export_collections(self) -> tuple[str, str] | None:
        """Fetch the collection export as (filename, pretty-printed JSON)."""
        try:
            data = await self.client.export_collections()
        except ApiError as e:
            self.notifier.error(e.message)
            return None
        return export_filename(), json.dumps(data, indent=2)

    def open_import(self) -> ImportSession:
        self.state.import_session = ImportSession()
        return self.state.import_session

    def close_import(self) -> None:
        self.state.import_session = None

    def load_import(self, text: str) -> bool:
        """Parse an import file into the open import session."""
        session = self.state.import_session or self.open_import()
        try:
            session.load_text(text, self.state.collections)
        except ImportFormatError:
            return False
        return True

    def set_delete_missing(self, delete_missing: bool) -> None:
        if self.state.import_session is not None:
            self.state.import_session.delete_missing = delete_missing

    async def apply_import(self) -> bool:
        session = self.state.import_session
        if session is None:
            return False
        try:
            session.ensure_applicable()
        except ImportConflictError as e:
            session.error = str(e)
            self.notifier.error(session.error)
            return False

        async with busy_guard(self.state, "import collections"):
            try:
                await self.client.import_collections(session.documents or [], session.delete_missing)
            except ApiError as e:
                session.error = e.message
                self.notifier.error(e.message)
                return False
            logger.info(
                "Collections imported",
                count=len(session.documents or []),
                delete_missing=session.delete_missing,
            )

        self.close_import()
        await self.load_collections()
        self.notifier.success("Collections imported")
        return True
