"""
File Store Unit Tests
Tests for core/store/file_store.py

Tests:
- upload/download/get_proof behavior and errors
- failed uploads leave the stored batch unchanged
- concurrent readers never see files and tree from different batches
"""
import threading

import pytest

from core.merkle import build_merkle_tree, verify_merkle_proof
from core.schemas.errors import EmptyInputError, IndexOutOfRangeError, NoTreeError
from core.store import FileStore, StoreSnapshot
from fixtures.vault_fixtures import make_files


class TestEmptyStore:
    """Tests for a store with nothing uploaded."""

    def test_download_raises_no_tree(self, store):
        with pytest.raises(NoTreeError):
            store.download(0)

    def test_get_proof_raises_no_tree(self, store):
        with pytest.raises(NoTreeError):
            store.get_proof(0)

    def test_properties(self, store):
        assert store.root_hash == ""
        assert store.file_count == 0
        assert store.snapshot() == StoreSnapshot()


class TestUpload:
    """Tests for FileStore.upload()."""

    def test_returns_root_hash(self, store, sample_files):
        root_hash = store.upload(sample_files)

        assert root_hash == build_merkle_tree(sample_files).root_hash
        assert store.root_hash == root_hash
        assert store.file_count == len(sample_files)

    def test_empty_upload_keeps_previous_batch(self, store, sample_files):
        """A rejected batch does not touch the stored one."""
        root_hash = store.upload(sample_files)

        with pytest.raises(EmptyInputError):
            store.upload([])

        assert store.root_hash == root_hash
        assert store.download(0) == sample_files[0]

    def test_upload_replaces_batch(self, store):
        store.upload(make_files(5))
        second = make_files(2, prefix="second")
        store.upload(second)

        assert store.file_count == 2
        assert store.download(1) == second[1]
        with pytest.raises(IndexOutOfRangeError):
            store.download(2)

    def test_upload_copies_mutable_input(self, store):
        """Mutating a bytearray after upload does not change the stored file."""
        data = bytearray(b"original")
        store.upload([data])
        data[:] = b"modified"

        assert store.download(0) == b"original"


class TestDownloadAndProof:
    """Tests for FileStore.download() and get_proof()."""

    def test_download_each_file(self, store, sample_files):
        store.upload(sample_files)
        for i, content in enumerate(sample_files):
            assert store.download(i) == content

    @pytest.mark.parametrize("index", [-1, 5, True])
    def test_download_out_of_range(self, store, sample_files, index):
        store.upload(sample_files)
        with pytest.raises(IndexOutOfRangeError):
            store.download(index)

    def test_proofs_verify(self, store, sample_files):
        root_hash = store.upload(sample_files)
        for i in range(len(sample_files)):
            proof = store.get_proof(i)
            assert verify_merkle_proof(store.download(i), i, proof, root_hash)

    def test_get_proof_out_of_range(self, store, sample_files):
        store.upload(sample_files)
        with pytest.raises(IndexOutOfRangeError):
            store.get_proof(len(sample_files))

    def test_clear(self, store, sample_files):
        store.upload(sample_files)
        store.clear()

        assert store.file_count == 0
        with pytest.raises(NoTreeError):
            store.download(0)


class TestConcurrency:
    """Tests for concurrent access."""

    @pytest.mark.slow
    def test_readers_see_consistent_snapshots(self):
        """Every snapshot read during concurrent uploads is internally consistent."""
        store = FileStore()
        batches = [make_files(n, prefix=f"batch{n}") for n in (1, 3, 4, 7, 8)]
        store.upload(batches[0])
        errors: list[str] = []
        stop = threading.Event()

        def writer():
            for _ in range(30):
                for batch in batches:
                    store.upload(batch)
            stop.set()

        def reader():
            while not stop.is_set():
                snapshot = store.snapshot()
                if snapshot.tree.leaf_count != snapshot.file_count:
                    errors.append("leaf count differs from file count")
                    return
                last = snapshot.file_count - 1
                proof = snapshot.tree.generate_proof(last)
                if not verify_merkle_proof(
                    snapshot.files[last], last, proof, snapshot.tree.root_hash
                ):
                    errors.append("proof from snapshot does not verify")
                    return

        threads = [threading.Thread(target=writer)] + [
            threading.Thread(target=reader) for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert errors == []

    def test_concurrent_uploads_end_in_one_batch(self):
        """After racing uploads the store holds exactly one of the batches."""
        store = FileStore()
        batches = [make_files(n, prefix=f"race{n}") for n in range(1, 9)]
        roots = {build_merkle_tree(b).root_hash for b in batches}

        threads = [threading.Thread(target=store.upload, args=(b,)) for b in batches]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.root_hash in roots
        snapshot = store.snapshot()
        assert build_merkle_tree(list(snapshot.files)).root_hash == snapshot.tree.root_hash
