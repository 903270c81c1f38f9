import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class FileCategory(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"


@dataclass(frozen=True)
class RawFile:
    """A file as handed over by the upload surface (drop or browse).

    Either ``data`` or ``path`` holds the bytes.
    """

    name: str
    content_type: str
    size_bytes: int
    data: bytes | None = None
    path: Path | None = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str = "") -> "RawFile":
        return cls(
            name=name,
            content_type=content_type or guess_content_type(name),
            size_bytes=len(data),
            data=data,
        )

    @classmethod
    def from_path(cls, path: Path, content_type: str = "") -> "RawFile":
        return cls(
            name=path.name,
            content_type=content_type or guess_content_type(path.name),
            size_bytes=path.stat().st_size,
            path=path,
        )


@dataclass(frozen=True)
class UploadedFile:
    """Canonical record for a file admitted to the working set."""

    id: str
    name: str
    category: FileCategory
    subtype: str
    content_type: str
    size_bytes: int
    byte_source: bytes | Path = field(repr=False)
    preview_ref: str | None = None

    @property
    def is_image(self) -> bool:
        return self.category is FileCategory.IMAGE


@dataclass(frozen=True)
class RejectedFile:
    """A file refused at ingestion, with the reason shown to the user."""

    name: str
    reason: str


@dataclass
class IngestionResult:
    accepted: list[UploadedFile] = field(default_factory=list)
    rejected: list[RejectedFile] = field(default_factory=list)


def guess_content_type(filename: str) -> str:
    guessed, _encoding = mimetypes.guess_type(filename)
    return guessed or ""


def classify(content_type: str) -> tuple[FileCategory, str]:
    """Return the category and display subtype for a declared content type.

    ``image/*`` is an image; anything else is a document whose subtype is the
    content type's second segment, or ``"document"`` when there is none.
    """
    if content_type.startswith("image/"):
        return FileCategory.IMAGE, "image"
    _, _, subtype = content_type.partition("/")
    return FileCategory.DOCUMENT, subtype or "document"
