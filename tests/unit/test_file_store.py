"""
Unit tests for the file-store backends and the engine running on the in-memory one.
"""
import pytest

from docstore.storage import AlreadyExists, Corrupt, LocalFileStore, MemoryFileStore, NotFound


@pytest.fixture(params=["local", "memory"])
def files(request, tmp_path):
    if request.param == "local":
        return LocalFileStore(tmp_path / "store")
    return MemoryFileStore()


@pytest.mark.unit
class TestFileStoreContract:
    """Both backends must behave the same for everything the engine relies on."""

    def test_make_and_list_dirs(self, files):
        files.make_dir(("a",))
        files.make_dir(("b",))

        assert sorted(files.list_dirs(())) == ["a", "b"]
        assert files.exists_dir(("a",))
        assert not files.exists_file(("a",))

    def test_make_dir_collision(self, files):
        files.make_dir(("a",))

        with pytest.raises(FileExistsError):
            files.make_dir(("a",))

    def test_write_read_replace(self, files):
        files.make_dir(("a",))
        files.atomic_write_text(("a", "doc"), '{"v": 1}')
        files.atomic_write_text(("a", "doc"), '{"v": 2}')

        assert files.read_text(("a", "doc")) == '{"v": 2}'
        assert files.list_files(("a",)) == ["doc"]
        assert files.exists_file(("a", "doc"))

    def test_write_into_missing_dir(self, files):
        with pytest.raises(FileNotFoundError):
            files.atomic_write_text(("missing", "doc"), "{}")

    def test_read_missing(self, files):
        files.make_dir(("a",))

        with pytest.raises(FileNotFoundError):
            files.read_text(("a", "nope"))

    def test_remove_file(self, files):
        files.make_dir(("a",))
        files.atomic_write_text(("a", "doc"), "{}")
        files.remove_file(("a", "doc"))

        assert files.list_files(("a",)) == []
        with pytest.raises(FileNotFoundError):
            files.remove_file(("a", "doc"))

    def test_list_missing_dir(self, files):
        with pytest.raises(FileNotFoundError):
            files.list_files(("nope",))

    def test_rename_and_remove_tree(self, files):
        files.make_dir(("a",))
        files.atomic_write_text(("a", "doc"), "{}")

        files.rename_dir(("a",), ("b",))

        assert files.list_dirs(()) == ["b"]
        assert files.read_text(("b", "doc")) == "{}"

        files.remove_tree(("b",))

        assert files.list_dirs(()) == []
        assert not files.exists_file(("b", "doc"))

    def test_files_and_dirs_listed_separately(self, files):
        files.make_dir(("a",))
        files.make_dir(("a", "sub"))
        files.atomic_write_text(("a", "doc"), "{}")

        assert files.list_dirs(("a",)) == ["sub"]
        assert files.list_files(("a",)) == ["doc"]


@pytest.mark.unit
class TestEngineOnMemoryStore:
    """The engine logic without any disk I/O."""

    def test_round_trip(self, memory_store):
        memory_store.create_collection("c")
        saved = memory_store.create_or_update_document("c", "d", {"a": 1, "b": 2})
        merged = memory_store.create_or_update_document("c", "d", {"b": 3})

        assert merged == {"a": 1, "b": 3, "uuid": saved["uuid"]}
        assert memory_store.list_documents("c") == ["d"]
        assert memory_store.filter_documents("c", {"b": 3}) == [merged]

    def test_collection_cascade(self, memory_store):
        memory_store.create_collection("c")
        memory_store.create_or_update_document("c", "d", {"a": 1})

        memory_store.delete_collection("c")

        assert memory_store.list_collections() == []
        assert memory_store.files.files == {}
        with pytest.raises(NotFound):
            memory_store.list_documents("c")

    def test_collision(self, memory_store):
        memory_store.create_collection("c")

        with pytest.raises(AlreadyExists):
            memory_store.create_collection("c")

    def test_corrupt_entry(self, memory_store):
        memory_store.create_collection("c")
        memory_store.files.files[("c", "bad")] = "nope"

        with pytest.raises(Corrupt):
            memory_store.get_document("c", "bad")
        with pytest.raises(Corrupt):
            memory_store.filter_documents("c", {})

    def test_reserved_entries_hidden(self, memory_store):
        memory_store.create_collection("c")
        memory_store.files.files[("c", ".tmp-123")] = "{}"
        memory_store.files.dirs.add((".trash-1",))

        assert memory_store.list_documents("c") == []
        assert memory_store.list_collections() == ["c"]
        assert memory_store.filter_documents("c", {}) == []
