import base64
import uuid


class PreviewRegistry:
    """Holds displayable previews (data URLs) for images in the working set.

    Every reference handed out by ``allocate`` must be passed back to
    ``release`` once its file leaves the working set.
    """

    def __init__(self) -> None:
        self._previews: dict[str, str] = {}

    def allocate(self, content_type: str, data: bytes) -> str:
        ref = f"preview-{uuid.uuid4().hex}"
        encoded = base64.b64encode(data).decode("ascii")
        self._previews[ref] = f"data:{content_type};base64,{encoded}"
        return ref

    def resolve(self, ref: str) -> str | None:
        return self._previews.get(ref)

    def release(self, ref: str | None) -> None:
        if ref is not None:
            self._previews.pop(ref, None)

    @property
    def active_count(self) -> int:
        return len(self._previews)
