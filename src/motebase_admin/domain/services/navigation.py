"""Route parsing and the unsaved-changes navigation guard.

Route tokens are path-like strings (optionally prefixed with '#'):

    /                                   dashboard
    /collections/<name>                 record list of a collection
    /records/<collection>/<id|new>      record editor
    /settings, /logs, /jobs, /crons     management views
    /login                              login

Anything else resolves to the dashboard. A token naming a collection that
does not exist also resolves to the dashboard, carrying an error, because
every collection-scoped view assumes its collection resolves.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from motebase_admin.core.logging import get_logger
from motebase_admin.domain.entities.route import DASHBOARD, RouteDescriptor, RouteName
from motebase_admin.domain.services.interaction import ConfirmationProvider, Notifier

logger = get_logger(__name__)

UNSAVED_CHANGES_PROMPT = "You have unsaved changes. Are you sure you want to leave?"

_SIMPLE_ROUTES = {
    "settings": RouteName.SETTINGS,
    "logs": RouteName.LOGS,
    "jobs": RouteName.JOBS,
    "crons": RouteName.CRONS,
    "login": RouteName.LOGIN,
}


def normalize_token(token: str | None) -> str:
    """Strip a leading '#' and collapse empty segments."""
    raw = (token or "").lstrip("#")
    segments = [s for s in raw.split("/") if s]
    return "/" + "/".join(segments)


def parse_route(token: str | None, collection_names: Iterable[str]) -> RouteDescriptor:
    """Map a route token to a typed route descriptor.

    Args:
        token: Path-like route token.
        collection_names: Names of the live collections.

    Returns:
        RouteDescriptor for the token. Unknown collections yield a dashboard
        descriptor with `error` set.
    """
    path = normalize_token(token)
    segments = [s for s in path.split("/") if s]

    if not segments:
        return DASHBOARD

    head = segments[0]

    if head == "collections" and len(segments) >= 2:
        return _collection_scoped(
            segments[1],
            collection_names,
            RouteDescriptor(RouteName.COLLECTION, token=path, collection_name=segments[1]),
        )

    if head == "records" and len(segments) >= 3:
        return _collection_scoped(
            segments[1],
            collection_names,
            RouteDescriptor(
                RouteName.RECORD,
                token=path,
                collection_name=segments[1],
                record_id=segments[2],
            ),
        )

    if head in _SIMPLE_ROUTES:
        return RouteDescriptor(_SIMPLE_ROUTES[head], token=path)

    return DASHBOARD


def _collection_scoped(
    name: str, collection_names: Iterable[str], route: RouteDescriptor
) -> RouteDescriptor:
    if name in set(collection_names):
        return route
    return RouteDescriptor(RouteName.DASHBOARD, token="/", error=f'Collection "{name}" not found')


@dataclass(frozen=True)
class NavigationOutcome:
    """Result of a navigation attempt.

    Attributes:
        accepted: False when the operator kept the current route.
        route: Route in effect after the attempt.
        redirected: True when the requested token resolved elsewhere.
    """

    accepted: bool
    route: RouteDescriptor
    redirected: bool = False


class NavigationGuard:
    """Tracks the current route and intercepts navigation away from dirty edits.

    Args:
        is_dirty: Predicate reporting unsaved record edits; evaluated on every
            attempt to leave the record editor.
        confirm: Provider asked before discarding unsaved edits.
        notifier: Receives route errors such as unknown collections.
        collection_names: Callable returning the live collection names.
    """

    def __init__(
        self,
        is_dirty: Callable[[], bool],
        confirm: ConfirmationProvider,
        notifier: Notifier,
        collection_names: Callable[[], Iterable[str]],
    ) -> None:
        self._is_dirty = is_dirty
        self._confirm = confirm
        self._notifier = notifier
        self._collection_names = collection_names
        self.current: RouteDescriptor = DASHBOARD

    def has_unsaved_changes(self) -> bool:
        """True while the record editor is active with unsaved edits."""
        return self.current.is_record_editor and self._is_dirty()

    def should_block_unload(self) -> bool:
        """Whether leaving the console entirely should be confirmed first."""
        return self.has_unsaved_changes()

    def request(self, token: str) -> NavigationOutcome:
        """Attempt to navigate to a route token.

        Declining the unsaved-changes prompt keeps the current route object
        exactly as it was.
        """
        if self.has_unsaved_changes() and not self._confirm.confirm(UNSAVED_CHANGES_PROMPT):
            logger.info("Navigation cancelled by operator", target=token, current=self.current.token)
            return NavigationOutcome(accepted=False, route=self.current)
        return self.force(token)

    def force(self, token: str) -> NavigationOutcome:
        """Navigate without consulting the dirty predicate."""
        route = parse_route(token, self._collection_names())
        if route.error:
            self._notifier.error(route.error)
        self.current = route
        logger.debug("Route changed", route=route.name.value, token=route.token)
        return NavigationOutcome(
            accepted=True,
            route=route,
            redirected=route.token != normalize_token(token),
        )
