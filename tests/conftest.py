"""Pytest configuration for all tests."""

import pytest

from motebase_admin.core.config import get_settings
from motebase_admin.domain.entities.collection import Collection
from motebase_admin.domain.services.interaction import ConfirmationProvider, Notifier


class ScriptedConfirmation(ConfirmationProvider):
    """Answers confirmations from a fixed value and records the questions."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    def confirm(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


class RecordingNotifier(Notifier):
    """Keeps every notification for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, message: str, level: str = "info") -> None:
        self.messages.append((level, message))

    @property
    def errors(self) -> list[str]:
        return [message for level, message in self.messages if level == "error"]


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def confirmation() -> ScriptedConfirmation:
    return ScriptedConfirmation(True)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def posts_collection() -> Collection:
    return Collection.from_dict(
        {
            "id": 1,
            "name": "posts",
            "type": "base",
            "schema": {
                "title": {"type": "text", "required": True},
                "views": {"type": "number"},
                "published": {"type": "boolean"},
                "meta": {"type": "json"},
                "cover": {"type": "file"},
                "author": {"type": "relation", "collection": "users"},
                "status": {"type": "select", "values": ["draft", "live"]},
            },
            "listRule": "",
            "viewRule": None,
        }
    )


@pytest.fixture
def users_collection() -> Collection:
    return Collection.from_dict(
        {
            "id": 2,
            "name": "users",
            "type": "auth",
            "schema": {
                "email": {"type": "email", "required": True},
                "name": {"type": "text"},
            },
        }
    )
