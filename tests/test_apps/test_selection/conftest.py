"""Shared fixtures for selection app tests."""

from collections.abc import Iterable, Iterator

import boto3
import pytest
from moto import mock_aws

from server.apps.selection.infrastructure.storage import FileStorage
from server.apps.selection.logic import session_manager
from server.apps.selection.logic.selection_engine import SelectionEngine

TEST_DIR = '/test/dir'
TEST_BUCKET = 'selection-files'


class FakeExplorer:
    """In-memory explorer with scripted existence answers."""

    def __init__(self) -> None:
        self.listings: dict[str, list[str]] = {}
        self.existing_paths: set[str] = set()
        self.exists_answers: list[bool] = []
        self.exists_calls: list[str] = []

    def list_entries(self, directory_path: str) -> list[str]:
        if directory_path not in self.listings:
            raise FileNotFoundError(f'No such directory: {directory_path}')
        return self.listings[directory_path]

    def exists(self, path: str) -> bool:
        self.exists_calls.append(path)
        if self.exists_answers:
            return self.exists_answers.pop(0)
        return path in self.existing_paths

    def is_directory(self, path: str) -> bool:
        return path in self.listings


class FakeManipulator:
    """Records every call and fails for configured source paths."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.failing_paths: dict[str, str] = {}
        self.fail_create_directory = False

    def copy(self, source: str, destination: str) -> None:
        self._record('copy', source, destination)

    def move(self, source: str, destination: str) -> None:
        self._record('move', source, destination)

    def delete(self, path: str) -> None:
        self._record('delete', path)

    def create_directory(self, path: str) -> None:
        self.calls.append(('create_directory', path))
        if self.fail_create_directory:
            raise PermissionError(f'Permission denied: {path}')

    def calls_for(self, operation: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == operation]

    def _record(self, operation: str, source: str, *rest: str) -> None:
        self.calls.append((operation, source, *rest))
        if source in self.failing_paths:
            raise OSError(self.failing_paths[source])


class ScriptedRandom:
    """Returns queued values, then zeros."""

    def __init__(self, values: Iterable[int] = ()) -> None:
        self.values = list(values)
        self.requested_bounds: list[int] = []

    def next_int(self, max_value: int) -> int:
        self.requested_bounds.append(max_value)
        if self.values:
            return self.values.pop(0)
        return 0


@pytest.fixture
def explorer() -> FakeExplorer:
    """Create fake explorer.

    Returns:
        FakeExplorer with no directories.
    """
    return FakeExplorer()


@pytest.fixture
def manipulator() -> FakeManipulator:
    """Create fake manipulator.

    Returns:
        FakeManipulator that succeeds unless told otherwise.
    """
    return FakeManipulator()


@pytest.fixture
def random_provider() -> ScriptedRandom:
    """Create scripted random provider.

    Returns:
        ScriptedRandom returning zeros.
    """
    return ScriptedRandom()


@pytest.fixture
def engine(explorer, manipulator, random_provider) -> SelectionEngine:
    """Create engine wired to the fakes.

    Returns:
        SelectionEngine with nothing loaded.
    """
    return SelectionEngine(explorer, manipulator, random_provider)


@pytest.fixture
def loaded_engine(engine, explorer) -> SelectionEngine:
    """Create engine with TEST_DIR loaded.

    Returns:
        SelectionEngine whose entries are a.txt, b.txt and c.txt.
    """
    explorer.listings[TEST_DIR] = ['a.txt', 'b.txt', 'c.txt']
    engine.load_directory(TEST_DIR)
    return engine


@pytest.fixture(autouse=True)
def isolated_sessions(monkeypatch) -> None:
    """Give every test an empty session registry."""
    monkeypatch.setattr(session_manager, '_sessions', {})


@pytest.fixture
def mock_s3() -> Iterator[object]:
    """Mock S3 service with selection-files bucket.

    Yields:
        boto3 S3 resource with selection-files bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=TEST_BUCKET)
        yield conn


@pytest.fixture
def s3_storage(mock_s3) -> FileStorage:
    """Create S3 storage backed by the mocked bucket.

    Returns:
        FileStorage instance.
    """
    return FileStorage(
        bucket_name=TEST_BUCKET,
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
        file_overwrite=False,
    )
