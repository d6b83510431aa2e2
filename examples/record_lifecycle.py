"""Drive FileAttachments and JsonFields through a record's insert/update/delete."""

import logging
import tempfile
from pathlib import Path

from contentstore import FileAttachments, FileContentStore, JsonFields, UploadedFile

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

with tempfile.TemporaryDirectory() as tmpdir:
    tmp = Path(tmpdir)
    store = FileContentStore(tmp / "storage", "/uploads/images")
    attachments = FileAttachments(store, ["image"], on_stored=lambda path: print(f"  stored {path}"))
    json_fields = JsonFields(["data"])

    def received(name: str, data: bytes) -> UploadedFile:
        temp = tmp / f"upload-{name}"
        temp.write_bytes(data)
        return UploadedFile(name=name, temp_path=temp)

    # ---- insert ----
    record: dict[str, object] = {"title": "Cat", "data": {"tags": ["pet"]}}
    attachments.load_uploads(record, {"image": received("cat.jpg", b"first picture")})
    errors = attachments.save_uploads(record)
    json_fields.encode(record)
    print(f"[insert] errors={errors}, record={record}")
    saved = dict(record)

    # ---- read back ----
    json_fields.decode(record)
    print(f"[find] data={record['data']}")

    # ---- update with a new picture ----
    attachments.load_uploads(record, {"image": received("cat2.jpg", b"second picture")})
    attachments.save_uploads(record, previous=saved)
    print(f"[update] old file exists: {store.has(str(saved['image']))}, new={record['image']}")

    # ---- delete ----
    report = attachments.clean(record)
    print(f"[delete] removed={report.removed}, not_removed={report.not_removed}")
