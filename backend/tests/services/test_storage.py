# tests/services/test_storage.py
import pytest

from bidding.config import settings
from bidding.services.storage import DELIVERABLES_FOLDER, LocalStorage, get_storage, storage_backend


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(root=tmp_path / "store", base_url="http://files.test/")


def test_upload_copies_under_folder(local_storage, tmp_path, pdf_bytes):
    source = tmp_path / "final.pdf"
    source.write_bytes(pdf_bytes)

    url = local_storage.upload(source, DELIVERABLES_FOLDER)

    assert url.startswith("http://files.test/storage/project-deliverables/")
    assert url.endswith(".pdf")
    stored = local_storage.root / url.split("/storage/", 1)[1]
    assert stored.read_bytes() == pdf_bytes
    # the source is left for the caller to clean up
    assert source.exists()


def test_uploads_get_unique_names(local_storage, tmp_path, pdf_bytes):
    source = tmp_path / "final.pdf"
    source.write_bytes(pdf_bytes)

    assert local_storage.upload(source, "x") != local_storage.upload(source, "x")


def test_delete(local_storage, tmp_path, pdf_bytes):
    source = tmp_path / "final.pdf"
    source.write_bytes(pdf_bytes)
    remote_path = local_storage.upload(source, "x").split("/storage/", 1)[1]

    assert local_storage.delete(remote_path) is True
    assert local_storage.delete(remote_path) is False


def test_delete_outside_root_refused(local_storage, tmp_path):
    outside = tmp_path / "keep.txt"
    outside.write_text("keep")
    local_storage.root.mkdir(parents=True)

    assert local_storage.delete("../keep.txt") is False
    assert outside.exists()


def test_default_backend_follows_settings():
    assert get_storage() is storage_backend
    assert storage_backend.root == settings.DELIVERABLES_PATH
    assert storage_backend.base_url == settings.PUBLIC_BASE_URL.rstrip("/")
