"""Filesystem-backed gallery and text writers."""
import asyncio
import shutil
from pathlib import Path
from ocrscan.adapters.storage.base import MediaWriter, FileWriter
from ocrscan.orchestrator.errors import WriteFailed


class GalleryWriter(MediaWriter):
    def __init__(self, status_store, gallery_dir):
        self.status = status_store
        self.gallery_dir = Path(gallery_dir)

    def _save_sync(self, src: Path) -> Path:
        self.gallery_dir.mkdir(parents=True, exist_ok=True)
        dest = self.gallery_dir / src.name
        n = 1
        while dest.exists():
            dest = self.gallery_dir / f"{src.stem}_{n}{src.suffix}"
            n += 1
        shutil.copy2(src, dest)
        return dest

    async def save(self, image) -> Path:
        src = Path(image.locator)
        try:
            dest = await asyncio.to_thread(self._save_sync, src)
        except OSError as e:
            raise WriteFailed(str(e)) from e
        self.status.log(f"gallery: saved {dest.name}")
        return dest


class LocalFileWriter(FileWriter):
    def __init__(self, status_store):
        self.status = status_store

    def _write_sync(self, path: Path, text: str):
        path.parent.mkdir(parents=True, exist_ok=True)
        # "x" mode: an existing export is never overwritten
        with open(path, "x", encoding="utf-8") as fh:
            fh.write(text)

    async def write(self, path, text: str):
        path = Path(path)
        try:
            await asyncio.to_thread(self._write_sync, path, text)
        except OSError as e:
            raise WriteFailed(str(e)) from e
        self.status.log(f"file_writer: wrote {path.name} ({len(text)} chars)")
