"""Settings, logs, jobs and crons management views."""

from typing import Any

from motebase_admin.core.exceptions import ApiError
from motebase_admin.core.logging import get_logger
from motebase_admin.application.services.state import ConsoleState, busy_guard
from motebase_admin.domain.services.interaction import ConfirmationProvider, Notifier
from motebase_admin.infrastructure.api.client import MoteBaseClient
from motebase_admin.infrastructure.api.schemas import ListPage

logger = get_logger(__name__)


class ManagementViews:
    """Operations behind the settings, logs, jobs and crons views.

    Shares the console's state, busy flag, confirmation provider and
    notifier; destructive actions are confirmed before any request.
    """

    def __init__(
        self,
        state: ConsoleState,
        client: MoteBaseClient,
        confirm: ConfirmationProvider,
        notifier: Notifier,
        per_page: int = 20,
    ) -> None:
        self.state = state
        self.client = client
        self.confirm = confirm
        self.notifier = notifier
        self.per_page = per_page

    @property
    def data(self):
        return self.state.management

    # Settings

    async def load_settings(self) -> None:
        self.data.settings_changed = False
        try:
            self.data.settings_data = await self.client.get_settings()
        except ApiError as e:
            self.notifier.error(e.message)

    def mark_settings_changed(self) -> None:
        self.data.settings_changed = True

    def update_setting(self, key: str, value: Any) -> None:
        """Change one value of the loaded settings object."""
        if self.data.settings_data is None:
            return
        self.data.settings_data.setdefault("settings", {})[key] = value
        self.mark_settings_changed()

    async def save_settings(self) -> bool:
        if self.data.settings_data is None:
            return False
        async with busy_guard(self.state, "save settings"):
            try:
                result = await self.client.update_settings(self.data.settings_data.get("settings") or {})
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            self.data.settings_data["settings"] = (result or {}).get("settings")
            self.data.settings_changed = False
        self.notifier.success("Settings saved")
        return True

    # Logs

    def _logs_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.data.logs_page, "perPage": self.per_page}
        params.update(self.data.logs_filter)
        return params

    async def load_logs(self) -> None:
        try:
            self.data.logs_data = await self.client.list_logs(self._logs_params())
        except ApiError as e:
            self.notifier.error(e.message)
            self.data.logs_data = ListPage()

    async def load_logs_stats(self) -> None:
        try:
            self.data.logs_stats = await self.client.logs_stats()
        except ApiError as e:
            # stats are secondary; the log list already reports failures
            logger.warning("Failed to load logs stats", error=e.message)

    async def set_logs_filter(self, **filters: str) -> None:
        self.data.logs_filter.update({k: v for k, v in filters.items() if k in self.data.logs_filter})
        self.data.logs_page = 1
        await self.load_logs()

    async def change_logs_page(self, page: int) -> None:
        total = self.data.logs_data.total_pages or 1
        if 1 <= page <= total:
            self.data.logs_page = page
            await self.load_logs()

    async def clear_logs(self) -> bool:
        if not self.confirm.confirm("Are you sure you want to clear all logs? This cannot be undone."):
            return False
        async with busy_guard(self.state, "clear logs"):
            try:
                await self.client.clear_logs()
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            self.data.logs_data = ListPage()
            self.data.logs_stats = None
            await self.load_logs_stats()
        return True

    # Jobs

    def _jobs_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"page": self.data.jobs_page, "perPage": self.per_page}
        params.update(self.data.jobs_filter)
        return params

    async def load_jobs(self) -> None:
        try:
            self.data.jobs_data = await self.client.list_jobs(self._jobs_params())
        except ApiError as e:
            self.notifier.error(e.message)
            self.data.jobs_data = ListPage()

    async def load_jobs_stats(self) -> None:
        try:
            self.data.jobs_stats = await self.client.jobs_stats()
        except ApiError as e:
            logger.warning("Failed to load jobs stats", error=e.message)

    async def _refresh_jobs(self) -> None:
        await self.load_jobs()
        await self.load_jobs_stats()

    async def set_jobs_filter(self, **filters: str) -> None:
        self.data.jobs_filter.update({k: v for k, v in filters.items() if k in self.data.jobs_filter})
        self.data.jobs_page = 1
        await self.load_jobs()

    async def change_jobs_page(self, page: int) -> None:
        total = self.data.jobs_data.total_pages or 1
        if 1 <= page <= total:
            self.data.jobs_page = page
            await self.load_jobs()

    async def retry_job(self, job_id: Any) -> bool:
        try:
            await self.client.retry_job(job_id)
        except ApiError as e:
            self.notifier.error(e.message)
            return False
        self.notifier.success("Job queued for retry")
        await self._refresh_jobs()
        return True

    async def retry_all_jobs(self) -> int | None:
        if not self.confirm.confirm("Are you sure you want to retry all failed jobs?"):
            return None
        async with busy_guard(self.state, "retry jobs"):
            try:
                result = await self.client.retry_all_jobs()
            except ApiError as e:
                self.notifier.error(e.message)
                return None
            self.notifier.success(f"{result.retried} job(s) queued for retry")
            await self._refresh_jobs()
        return result.retried

    async def delete_job(self, job_id: Any) -> bool:
        if not self.confirm.confirm("Are you sure you want to delete this job?"):
            return False
        async with busy_guard(self.state, "delete job"):
            try:
                await self.client.delete_job(job_id)
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            await self._refresh_jobs()
        return True

    async def clear_jobs(self, status: str | None = None) -> bool:
        label = status or "all"
        if not self.confirm.confirm(f"Are you sure you want to clear {label} jobs? This cannot be undone."):
            return False
        async with busy_guard(self.state, "clear jobs"):
            try:
                await self.client.clear_jobs(status)
            except ApiError as e:
                self.notifier.error(e.message)
                return False
            await self._refresh_jobs()
        self.notifier.success(f"{label} jobs cleared")
        return True

    # Crons

    async def load_crons(self) -> None:
        try:
            self.data.crons = await self.client.list_crons()
        except ApiError as e:
            self.notifier.error(e.message)
            self.data.crons = []
