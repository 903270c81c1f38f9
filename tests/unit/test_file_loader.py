from pathlib import Path

import pytest

from batchrecord.core.errors import ErrorStage
from batchrecord.ingestion.exceptions import FileReadError
from batchrecord.ingestion.file_loader import FileLoader
from batchrecord.ingestion.models import FileCategory, RawFile, UploadedFile


def _make_file(byte_source: bytes | Path) -> UploadedFile:
    return UploadedFile(
        id="f1",
        name="scan.png",
        category=FileCategory.IMAGE,
        subtype="image",
        content_type="image/png",
        size_bytes=4,
        byte_source=byte_source,
    )


class TestLoad:
    def test_returns_in_memory_bytes(self) -> None:
        assert FileLoader().load(_make_file(b"data")) == b"data"

    def test_reads_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "scan.png"
        path.write_bytes(b"disk")

        assert FileLoader().load(_make_file(path)) == b"disk"

    def test_missing_file_raises_read_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError, match="Error reading file") as info:
            FileLoader().load(_make_file(tmp_path / "missing.png"))
        assert info.value.to_detail().stage is ErrorStage.RECOGNITION


class TestLoadRaw:
    def test_prefers_data(self) -> None:
        raw = RawFile(name="a.png", content_type="image/png", size_bytes=1, data=b"a")
        assert FileLoader().load_raw(raw) == b"a"

    def test_raw_without_content_raises(self) -> None:
        raw = RawFile(name="a.png", content_type="image/png", size_bytes=1)
        with pytest.raises(FileReadError, match="no content"):
            FileLoader().load_raw(raw)
