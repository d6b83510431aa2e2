"""FileContentStore basics: store, dedupe, read and remove."""

import io
import tempfile
from pathlib import Path

from contentstore import FileContentStore, InMemoryContentStore, store_file

with tempfile.TemporaryDirectory() as tmpdir:
    store = FileContentStore(Path(tmpdir) / "storage", "/uploads/images")

    outcome = store.store(b"abcd", "jpg")
    print(f"[store] ok={outcome.ok}, reference={outcome.reference}")
    print(f"  on disk: {store.resolve(outcome.reference)}")

    # Same bytes and extension map to the same reference.
    again = store.store(io.BytesIO(b"abcd"), "jpg")
    print(f"  same reference again: {again.reference == outcome.reference}")

    # A different extension is a different reference.
    png = store.store(b"abcd", "png")
    print(f"  png reference: {png.reference}")

    print(f"  read() = {store.read(outcome.reference)!r}")
    print(f"  remove() = {store.remove(outcome.reference)}")
    print(f"  remove() again = {store.remove(outcome.reference)}")

    # ---- store_file helper ----
    sample = Path(tmpdir) / "Photo.PNG"
    sample.write_bytes(b"\x89PNG fake image")
    from_disk = store_file(store, sample)
    print(f"\n[store_file] reference={from_disk.reference}")

# ---- InMemoryContentStore ----
# Same reference semantics without touching the filesystem.

memory = InMemoryContentStore("/uploads/images")
ref = memory.store(b"abcd", "jpg").reference
print(f"\n[InMemory] reference={ref}, paths={memory.paths}")
