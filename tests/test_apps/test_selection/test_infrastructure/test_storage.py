"""Tests for Django storage capabilities (local and S3)."""

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage

from server.apps.selection.infrastructure.local import SystemRandomProvider
from server.apps.selection.infrastructure.storage import (
    FOLDER_MARKER,
    StorageFileSystem,
    join_storage_path,
)
from server.apps.selection.logic.selection_engine import SelectionEngine

TEST_BUCKET = 'selection-files'


def _keys(mock_s3) -> list[str]:
    return sorted(obj.key for obj in mock_s3.Bucket(TEST_BUCKET).objects.all())


def _put(mock_s3, key: str, body: bytes = b'content') -> None:
    mock_s3.Bucket(TEST_BUCKET).put_object(Key=key, Body=body)


def _read(mock_s3, key: str) -> bytes:
    return mock_s3.Object(TEST_BUCKET, key).get()['Body'].read()


class RenamingStorage(FileSystemStorage):
    """Local storage that never keeps the requested file name."""

    def get_available_name(self, name, max_length=None):
        """Append a suffix the way storages do for taken names."""
        return f'{name}_renamed'


class TestJoinStoragePath:
    """Tests for join_storage_path."""

    def test_root(self):
        """Test joining onto the storage root."""
        assert join_storage_path('', 'a.txt') == 'a.txt'
        assert join_storage_path('/', 'a.txt') == 'a.txt'

    def test_nested(self):
        """Test joining strips stray separators."""
        assert join_storage_path('/photos/2024/', 'a.txt') == 'photos/2024/a.txt'


class TestLocalStorageFileSystem:
    """Tests for StorageFileSystem over FileSystemStorage."""

    @pytest.fixture
    def filesystem(self, tmp_path):
        """Create filesystem over a temporary local storage.

        Returns:
            StorageFileSystem with photos/a.txt, photos/b.txt, photos/raw/.
        """
        photos = tmp_path / 'photos'
        (photos / 'raw').mkdir(parents=True)
        (photos / 'a.txt').write_text('alpha')
        (photos / 'b.txt').write_text('bravo')
        (photos / 'raw' / 'img.raw').write_text('raw')
        return StorageFileSystem(FileSystemStorage(location=str(tmp_path)))

    def test_list_entries(self, filesystem):
        """Test folders are listed before files."""
        assert filesystem.list_entries('photos') == ['raw', 'a.txt', 'b.txt']

    def test_list_missing_directory(self, filesystem):
        """Test listing a missing folder raises."""
        with pytest.raises(FileNotFoundError):
            filesystem.list_entries('missing')

    def test_exists_and_is_directory(self, filesystem):
        """Test existence and folder checks."""
        assert filesystem.exists('photos/a.txt')
        assert filesystem.exists('photos/raw')
        assert not filesystem.exists('photos/nope')
        assert filesystem.is_directory('photos/raw')
        assert not filesystem.is_directory('photos/a.txt')

    def test_create_directory_makes_real_directory(self, filesystem, tmp_path):
        """Test local storages get a real directory, no marker."""
        filesystem.create_directory('photos/new')
        filesystem.create_directory('photos/new')

        assert (tmp_path / 'photos' / 'new').is_dir()
        assert not (tmp_path / 'photos' / 'new' / FOLDER_MARKER).exists()

    def test_copy_file_and_folder(self, filesystem, tmp_path):
        """Test copying streams file content and recurses into folders."""
        filesystem.create_directory('backup')

        filesystem.copy('photos/a.txt', 'backup/a.txt')
        filesystem.copy('photos/raw', 'backup/raw')

        assert (tmp_path / 'backup' / 'a.txt').read_text() == 'alpha'
        assert (tmp_path / 'backup' / 'raw' / 'img.raw').read_text() == 'raw'
        assert (tmp_path / 'photos' / 'a.txt').exists()

    def test_copy_missing_source(self, filesystem):
        """Test copying a missing file raises."""
        with pytest.raises(FileNotFoundError):
            filesystem.copy('photos/nope', 'backup/nope')

    def test_move_file(self, filesystem, tmp_path):
        """Test moving removes the source."""
        filesystem.move('photos/b.txt', 'archive/b.txt')

        assert (tmp_path / 'archive' / 'b.txt').read_text() == 'bravo'
        assert not (tmp_path / 'photos' / 'b.txt').exists()

    def test_copy_replaces_existing_file(self, filesystem, tmp_path):
        """Test copying onto a file overwrites it in place."""
        filesystem.copy('photos/a.txt', 'photos/b.txt')

        photos = tmp_path / 'photos'
        assert (photos / 'b.txt').read_text() == 'alpha'
        assert sorted(path.name for path in photos.iterdir()) == [
            'a.txt',
            'b.txt',
            'raw',
        ]

    def test_move_onto_existing_folder(self, filesystem, tmp_path):
        """Test a file is never saved beside a same-named folder."""
        (tmp_path / 'archive' / 'a.txt').mkdir(parents=True)

        with pytest.raises(IsADirectoryError):
            filesystem.move('photos/a.txt', 'archive/a.txt')

        assert (tmp_path / 'photos' / 'a.txt').read_text() == 'alpha'
        archive = tmp_path / 'archive'
        assert [path.name for path in archive.iterdir()] == ['a.txt']

    def test_move_renamed_by_storage(self, tmp_path):
        """Test a copy saved under another name is removed and reported."""
        (tmp_path / 'a.txt').write_text('alpha')
        filesystem = StorageFileSystem(RenamingStorage(location=str(tmp_path)))

        with pytest.raises(FileExistsError):
            filesystem.move('a.txt', 'b.txt')

        assert sorted(path.name for path in tmp_path.iterdir()) == ['a.txt']

    def test_delete_folder(self, filesystem, tmp_path):
        """Test deleting a folder removes it entirely."""
        filesystem.delete('photos/raw')

        assert not (tmp_path / 'photos' / 'raw').exists()

    def test_delete_missing_path_is_noop(self, filesystem):
        """Test deleting something already gone does not raise."""
        filesystem.delete('photos/nope')


class TestS3StorageFileSystem:
    """Tests for StorageFileSystem over the S3 FileStorage."""

    @pytest.fixture
    def filesystem(self, s3_storage, mock_s3):
        """Create filesystem over mocked S3 with a photos folder.

        Returns:
            StorageFileSystem with photos/a.txt, photos/b.txt, photos/raw/.
        """
        _put(mock_s3, 'photos/a.txt', b'alpha')
        _put(mock_s3, 'photos/b.txt', b'bravo')
        _put(mock_s3, 'photos/raw/img.raw', b'raw')
        return StorageFileSystem(s3_storage)

    def test_list_entries(self, filesystem):
        """Test prefixes are listed as folders before files."""
        assert filesystem.list_entries('photos') == ['raw', 'a.txt', 'b.txt']

    def test_list_missing_directory(self, filesystem):
        """Test listing an unknown prefix raises."""
        with pytest.raises(FileNotFoundError):
            filesystem.list_entries('missing')

    def test_create_directory_writes_marker(self, filesystem, mock_s3):
        """Test empty folders are kept alive by a marker object."""
        filesystem.create_directory('empty')
        filesystem.create_directory('empty')

        assert 'empty/.folder' in _keys(mock_s3)
        assert filesystem.is_directory('empty')
        assert filesystem.exists('empty')
        assert filesystem.list_entries('empty') == []

    def test_is_directory_for_file(self, filesystem):
        """Test a file key is not a folder."""
        assert not filesystem.is_directory('photos/a.txt')
        assert filesystem.exists('photos/a.txt')

    def test_copy_file_server_side(self, filesystem, mock_s3):
        """Test file copy keeps the source object."""
        filesystem.copy('photos/a.txt', 'backup/a.txt')

        assert _read(mock_s3, 'backup/a.txt') == b'alpha'
        assert 'photos/a.txt' in _keys(mock_s3)

    def test_copy_folder(self, filesystem, mock_s3):
        """Test folder copy recurses."""
        filesystem.copy('photos/raw', 'backup/raw')

        assert _read(mock_s3, 'backup/raw/img.raw') == b'raw'

    def test_move_file(self, filesystem, mock_s3):
        """Test file move deletes the source object."""
        filesystem.move('photos/a.txt', 'archive/a.txt')

        keys = _keys(mock_s3)
        assert 'archive/a.txt' in keys
        assert 'photos/a.txt' not in keys

    def test_move_missing_file(self, filesystem):
        """Test moving an unknown key raises."""
        with pytest.raises(FileNotFoundError):
            filesystem.move('photos/nope', 'archive/nope')

    def test_delete_folder(self, filesystem, mock_s3):
        """Test folder delete removes every object under the prefix."""
        filesystem.create_directory('photos/raw')

        filesystem.delete('photos/raw')

        assert _keys(mock_s3) == ['photos/a.txt', 'photos/b.txt']

    def test_engine_move_to_explicit_destination(self, filesystem, mock_s3):
        """Test a full engine move over S3."""
        engine = SelectionEngine(filesystem, filesystem, SystemRandomProvider())
        engine.load_directory('photos')
        engine.select('a.txt')
        engine.select('raw')

        operation_result = engine.move_selection('archive')

        assert operation_result.errors == []
        assert engine.get_entries() == ['b.txt']
        keys = _keys(mock_s3)
        assert 'archive/a.txt' in keys
        assert 'archive/raw/img.raw' in keys
        assert 'photos/raw/img.raw' not in keys


class TestFileStorage:
    """Tests for FileStorage helpers."""

    def test_save_and_delete(self, s3_storage, mock_s3):
        """Test logged save and delete round trip to S3."""
        saved_name = s3_storage.save('notes/todo.txt', ContentFile(b'todo'))

        assert saved_name == 'notes/todo.txt'
        assert _read(mock_s3, 'notes/todo.txt') == b'todo'

        s3_storage.delete('notes/todo.txt')

        assert _keys(mock_s3) == []

    def test_move_object(self, s3_storage, mock_s3):
        """Test server-side move."""
        _put(mock_s3, 'src.txt', b'data')

        s3_storage.move_object('src.txt', 'dst.txt')

        assert _keys(mock_s3) == ['dst.txt']
        assert _read(mock_s3, 'dst.txt') == b'data'
