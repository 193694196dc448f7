"""Shared pytest fixtures for gws-markdown-formatter tests."""

import tempfile
from unittest.mock import MagicMock

import pytest

from core.config import reload_config
from core.container import reset_container


class InMemoryCheckpointStore:
    """In-memory implementation of CheckpointStoreProtocol for testing."""

    def __init__(self):
        self.checkpoints: dict[str, int] = {}

    def get_checkpoint(self, task_id: str) -> int | None:
        return self.checkpoints.get(task_id)

    def set_checkpoint(self, task_id: str, next_block: int) -> None:
        self.checkpoints[task_id] = next_block

    def clear_checkpoint(self, task_id: str) -> bool:
        return self.checkpoints.pop(task_id, None) is not None


class FakeScheduler:
    """Records scheduling calls instead of arming timers."""

    def __init__(self):
        self.scheduled: list[tuple[str, float]] = []
        self.cancelled: list[str] = []

    def schedule_once(self, task_id: str, delay: float) -> None:
        self.scheduled.append((task_id, delay))

    def cancel_all(self, task_id: str) -> int:
        self.cancelled.append(task_id)
        pending = [s for s in self.scheduled if s[0] == task_id]
        self.scheduled = [s for s in self.scheduled if s[0] != task_id]
        return len(pending)


class RecordingNotifier:
    """Keeps every notification for assertions."""

    def __init__(self):
        self.messages: list[str] = []
        self.emails: list[tuple[str, str, str]] = []

    def notify_user(self, message: str) -> None:
        self.messages.append(message)

    async def notify_async(self, identity: str, subject: str, body: str) -> None:
        self.emails.append((identity, subject, body))


class FakeClock:
    """Clock that advances by a fixed step every time it is read."""

    def __init__(self, step: float = 0.0):
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch, tmp_path):
    """Keep config, checkpoints and the global container out of the user's environment."""
    monkeypatch.setenv("FORMATTER_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.delenv("USER_GOOGLE_EMAIL", raising=False)
    reload_config()
    reset_container()
    yield
    reset_container()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def checkpoint_store():
    return InMemoryCheckpointStore()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_docs_service():
    """Create a mock Google Docs service."""
    service = MagicMock()
    service.documents.return_value.batchUpdate.return_value.execute.return_value = {"replies": []}
    return service


@pytest.fixture
def mock_drive_service():
    """Create a mock Google Drive service reporting edit access."""
    service = MagicMock()
    service.files.return_value.get.return_value.execute.return_value = {
        "id": "doc123",
        "name": "Test Doc",
        "capabilities": {"canEdit": True, "canShare": True},
        "ownedByMe": True,
        "permissions": [],
    }
    return service


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        return reload_config()

    return _override


def make_docs_document(lines: list[str], title: str = "Test Doc", bullets: set[int] | None = None) -> dict:
    """Build a Docs API document resource with one paragraph per line."""
    bullets = bullets or set()
    content = [{"startIndex": 0, "endIndex": 1, "sectionBreak": {}}]
    index = 1
    for i, line in enumerate(lines):
        end = index + len(line) + 1
        paragraph = {
            "elements": [{"startIndex": index, "endIndex": end, "textRun": {"content": line + "\n"}}],
            "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"},
        }
        if i in bullets:
            paragraph["bullet"] = {"listId": "list1"}
        content.append({"startIndex": index, "endIndex": end, "paragraph": paragraph})
        index = end
    return {"documentId": "doc123", "title": title, "body": {"content": content}}


@pytest.fixture
def docs_document():
    """Factory for Docs API document resources."""
    return make_docs_document
