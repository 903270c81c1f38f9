from pathlib import Path

from batchrecord.ingestion.exceptions import FileReadError
from batchrecord.ingestion.models import RawFile, UploadedFile


class FileLoader:
    """Reads the bytes behind an uploaded file, from memory or from disk."""

    def load(self, file: UploadedFile) -> bytes:
        """Return the file's bytes.

        Raises:
            FileReadError: if the backing path cannot be read.
        """
        return self._read(file.byte_source, file.name)

    def load_raw(self, raw: RawFile) -> bytes:
        if raw.data is not None:
            return raw.data
        if raw.path is None:
            raise FileReadError(f"Error reading file: {raw.name} has no content")
        return self._read(raw.path, raw.name)

    @staticmethod
    def _read(source: bytes | Path, name: str) -> bytes:
        if isinstance(source, bytes):
            return source
        try:
            return source.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Error reading file: {name}: {exc}") from exc
