"""Tests for FileAttachments."""

from collections.abc import Callable
from pathlib import Path

import pytest

from contentstore.attachments import UPLOAD_FAILED_MESSAGE, CleanupReport, FileAttachments
from contentstore.errors import WriteError
from contentstore.storage import ContentReference, FileContentStore, InMemoryContentStore, StoreOutcome
from contentstore.uploads import UploadedFile


def _upload(tmp_path: Path, name: str, data: bytes) -> UploadedFile:
    temp = tmp_path / f"{len(list(tmp_path.iterdir()))}.tmp"
    temp.write_bytes(data)
    return UploadedFile(name=name, temp_path=temp)


class RecordingStore(InMemoryContentStore):
    """InMemoryContentStore that records remove calls and can fail selected ones."""

    def __init__(self, *, failing: tuple[str, ...] = (), raising: tuple[str, ...] = ()) -> None:
        super().__init__("uploads")
        self.removed_calls: list[str] = []
        self._failing = failing
        self._raising = raising

    def remove(self, ref_or_path: ContentReference | str) -> bool:
        path = str(ref_or_path)
        self.removed_calls.append(path)
        if path in self._raising:
            raise PermissionError(path)
        if path in self._failing:
            return False
        return super().remove(path)


class FailingStore(InMemoryContentStore):
    def store(self, content: object, extension: str) -> StoreOutcome:
        return StoreOutcome(error=WriteError("/srv/storage/uploads"))


def test_load_uploads_only_for_declared_fields(tmp_path: Path) -> None:
    attachments = FileAttachments(InMemoryContentStore(), ["image"])
    image = _upload(tmp_path, "a.jpg", b"a")
    other = _upload(tmp_path, "b.jpg", b"b")
    values: dict[str, object] = {"image": "/uploads/old.jpg", "title": "x"}

    attachments.load_uploads(values, {"image": image, "title": other})

    assert values == {"image": image, "title": "x"}


def test_load_uploads_keeps_value_without_upload() -> None:
    attachments = FileAttachments(InMemoryContentStore(), ["image"])
    values: dict[str, object] = {"image": "/uploads/old.jpg"}
    attachments.load_uploads(values, {"image": None})
    assert values == {"image": "/uploads/old.jpg"}


def test_save_uploads_on_insert_stores_reference(tmp_path: Path) -> None:
    store = InMemoryContentStore("/uploads/images")
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "cat.JPG", b"abcd")}

    errors = attachments.save_uploads(values)

    assert errors == {}
    assert values["image"] == "/uploads/images/e2fc714c4727ee9395f324cd2e7f331f.jpg"
    assert store.read(str(values["image"])) == b"abcd"


def test_save_uploads_keeps_plain_string_values() -> None:
    store = RecordingStore()
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": "/uploads/kept.jpg"}

    assert attachments.save_uploads(values, previous={"image": "/uploads/kept.jpg"}) == {}
    assert values == {"image": "/uploads/kept.jpg"}
    assert store.removed_calls == []


def test_replace_on_update_removes_old_reference(tmp_path: Path) -> None:
    store = RecordingStore()
    old = store.store(b"old content", "jpg").reference
    assert old is not None
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "new.jpg", b"new content")}

    errors = attachments.save_uploads(values, previous={"image": old.path})

    assert errors == {}
    assert values["image"] != old.path
    assert store.has(str(values["image"])) is True
    assert store.has(old) is False
    assert store.removed_calls == [old.path]


def test_replace_with_identical_content_keeps_file(tmp_path: Path) -> None:
    store = RecordingStore()
    old = store.store(b"same", "jpg").reference
    assert old is not None
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "again.jpg", b"same")}

    attachments.save_uploads(values, previous={"image": old.path})

    assert values["image"] == old.path
    assert store.has(old) is True
    assert store.removed_calls == []


@pytest.mark.parametrize(
    "as_previous",
    [
        pytest.param(lambda ref: ref, id="reference-object"),
        pytest.param(lambda ref: ref.path.lstrip("/"), id="no-leading-slash"),
        pytest.param(lambda ref: "//" + ref.path.lstrip("/"), id="doubled-slash"),
    ],
)
def test_identical_content_is_kept_whatever_the_previous_form(
    tmp_path: Path,
    as_previous: Callable[[ContentReference], object],
) -> None:
    store = RecordingStore()
    old = store.store(b"same", "jpg").reference
    assert old is not None
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "again.jpg", b"same")}

    errors = attachments.save_uploads(values, previous={"image": as_previous(old)})

    assert errors == {}
    assert values["image"] == old.path
    assert store.has(old) is True
    assert store.removed_calls == []


def test_replace_removes_previous_written_without_leading_slash(tmp_path: Path) -> None:
    store = RecordingStore()
    old = store.store(b"old content", "jpg").reference
    assert old is not None
    attachments = FileAttachments(store, ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "new.jpg", b"new content")}

    attachments.save_uploads(values, previous={"image": old.path.lstrip("/")})

    assert store.removed_calls == [old.path]
    assert store.has(old) is False


def test_replace_continues_when_removing_previous_raises(tmp_path: Path) -> None:
    store = RecordingStore(raising=("/uploads/old.jpg",))
    store._contents["/uploads/old.jpg"] = b"old"
    seen: list[str] = []
    attachments = FileAttachments(store, ["image", "document"], on_stored=seen.append)
    values: dict[str, object] = {
        "image": _upload(tmp_path, "new.jpg", b"img"),
        "document": _upload(tmp_path, "new.pdf", b"doc"),
    }

    errors = attachments.save_uploads(values, previous={"image": "/uploads/old.jpg"})

    assert errors == {}
    assert seen == [values["image"], values["document"]]
    assert store.read(str(values["image"])) == b"img"
    assert store.read(str(values["document"])) == b"doc"
    assert store.removed_calls == ["/uploads/old.jpg"]
    assert store.has("/uploads/old.jpg") is True


def test_failed_store_keeps_old_reference(tmp_path: Path) -> None:
    store = FailingStore()
    attachments = FileAttachments(store, ["image"])
    upload = _upload(tmp_path, "new.jpg", b"new")
    values: dict[str, object] = {"image": upload}

    errors = attachments.save_uploads(values, previous={"image": "/uploads/old.jpg"})

    assert errors == {"image": UPLOAD_FAILED_MESSAGE}
    assert values["image"] is upload


def test_failed_store_does_not_remove_previous(tmp_path: Path) -> None:
    removed: list[str] = []

    class Store(FailingStore):
        def remove(self, ref_or_path: ContentReference | str) -> bool:
            removed.append(str(ref_or_path))
            return True

    attachments = FileAttachments(Store(), ["image"])
    values: dict[str, object] = {"image": _upload(tmp_path, "new.jpg", b"new")}
    attachments.save_uploads(values, previous={"image": "/uploads/old.jpg"})
    assert removed == []


def test_on_stored_callback_receives_new_reference(tmp_path: Path) -> None:
    seen: list[str] = []
    attachments = FileAttachments(InMemoryContentStore(), ["image", "document"], on_stored=seen.append)
    values: dict[str, object] = {
        "image": _upload(tmp_path, "a.png", b"img"),
        "document": _upload(tmp_path, "b.pdf", b"doc"),
    }

    attachments.save_uploads(values)

    assert seen == [values["image"], values["document"]]


def test_replace_on_update_with_file_store(tmp_path: Path) -> None:
    storage = tmp_path / "storage"
    store = FileContentStore(storage, "/uploads/images")
    attachments = FileAttachments(store, ["image"])
    incoming = tmp_path / "incoming"
    incoming.mkdir()

    values: dict[str, object] = {"image": _upload(incoming, "first.jpg", b"first")}
    attachments.save_uploads(values)
    first = str(values["image"])

    previous = dict(values)
    values["image"] = _upload(incoming, "second.jpg", b"second")
    attachments.save_uploads(values, previous=previous)
    second = str(values["image"])

    assert store.has(first) is False
    assert store.read(second) == b"second"


def test_clean_removes_every_reference() -> None:
    store = InMemoryContentStore()
    image = store.store(b"img", "jpg").reference
    document = store.store(b"doc", "pdf").reference
    assert image is not None
    assert document is not None
    attachments = FileAttachments(store, ["image", "document", "missing"])

    report = attachments.clean({"image": image.path, "document": document.path, "missing": None})

    assert report == CleanupReport(removed=(image.path, document.path), not_removed=())
    assert store.paths == ()


@pytest.mark.parametrize(
    "store",
    [
        pytest.param(RecordingStore(failing=("/uploads/a.jpg",)), id="returns-false"),
        pytest.param(RecordingStore(raising=("/uploads/a.jpg",)), id="raises"),
    ],
)
def test_clean_continues_after_failure(store: RecordingStore) -> None:
    store._contents.update({"/uploads/a.jpg": b"a", "/uploads/b.pdf": b"b"})
    attachments = FileAttachments(store, ["image", "document"])

    report = attachments.clean({"image": "/uploads/a.jpg", "document": "/uploads/b.pdf"})

    assert store.removed_calls == ["/uploads/a.jpg", "/uploads/b.pdf"]
    assert report.not_removed == ("/uploads/a.jpg",)
    assert report.removed == ("/uploads/b.pdf",)
    assert store.has("/uploads/b.pdf") is False


def test_clean_missing_file_is_not_fatal(tmp_path: Path) -> None:
    attachments = FileAttachments(FileContentStore(tmp_path, "uploads"), ["image"])
    report = attachments.clean({"image": "/uploads/gone.jpg"})
    assert report.removed == ()
    assert report.not_removed == ("/uploads/gone.jpg",)
