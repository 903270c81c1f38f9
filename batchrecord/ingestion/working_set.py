from collections.abc import Callable, Iterator

from batchrecord.ingestion.models import UploadedFile
from batchrecord.ingestion.previews import PreviewRegistry
from batchrecord.logging.logger import Log


class WorkingSet:
    """Files currently uploaded, keyed by id, with unique display names.

    Adding a file whose name is already present replaces the earlier entry.
    ``on_discard`` is called with the id of every file that leaves the set.
    """

    def __init__(
        self,
        previews: PreviewRegistry,
        on_discard: Callable[[str], None] | None = None,
    ) -> None:
        self._previews = previews
        self._on_discard = on_discard
        self._files: dict[str, UploadedFile] = {}

    def add(self, file: UploadedFile) -> UploadedFile | None:
        """Add a file and return the same-named file it replaced, if any."""
        replaced = self.find_by_name(file.name)
        if replaced is not None:
            self._discard(replaced)
            Log.info(f"Replaced {file.name}", file_id=replaced.id)
        self._files[file.id] = file
        return replaced

    def get(self, file_id: str) -> UploadedFile | None:
        return self._files.get(file_id)

    def find_by_name(self, name: str) -> UploadedFile | None:
        for file in reversed(list(self._files.values())):
            if file.name == name:
                return file
        return None

    def remove(self, file_id: str) -> UploadedFile | None:
        file = self._files.get(file_id)
        if file is not None:
            self._discard(file)
        return file

    def remove_by_name(self, name: str) -> UploadedFile | None:
        file = self.find_by_name(name)
        if file is not None:
            self._discard(file)
        return file

    def clear(self) -> None:
        for file in list(self._files.values()):
            self._discard(file)

    def _discard(self, file: UploadedFile) -> None:
        del self._files[file.id]
        self._previews.release(file.preview_ref)
        if self._on_discard is not None:
            self._on_discard(file.id)

    def __iter__(self) -> Iterator[UploadedFile]:
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._files
