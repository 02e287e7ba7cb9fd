from __future__ import annotations

import base64
from collections.abc import Iterable
from pathlib import Path

import structlog

from znuny_rest_client.adapters.znuny.models import PendingAttachment
from znuny_rest_client.domain.errors import FileReadError

log = structlog.get_logger(__name__)


def read_attachment(file_path: str | Path, file_name: str, mime_type: str) -> PendingAttachment:
    path = Path(file_path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise FileReadError(str(path), f"Unable to read attachment {path}: {exc}") from exc

    log.debug(
        "znuny.attachment.read",
        filename=file_name,
        content_type=mime_type,
        size=len(raw),
    )
    return PendingAttachment(
        content=base64.b64encode(raw).decode("ascii"),
        content_type=mime_type,
        filename=file_name,
    )


class AttachmentStage:
    """
    Ordered list of attachments waiting for the next write request.

    The owner calls `snapshot()` to build the request and `discard()` with that snapshot
    only after the request succeeded, so a failed request keeps everything staged for a
    retry and files staged while the request was in flight stay queued.
    """

    def __init__(self) -> None:
        self._items: list[PendingAttachment] = []

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def add(self, attachment: PendingAttachment) -> None:
        self._items.append(attachment)

    def snapshot(self) -> tuple[PendingAttachment, ...]:
        return tuple(self._items)

    def discard(self, sent: Iterable[PendingAttachment]) -> None:
        """Remove exactly the given items (matched by identity), keeping everything else."""
        for item in sent:
            for index, staged in enumerate(self._items):
                if staged is item:
                    del self._items[index]
                    break

    def clear(self) -> None:
        self._items.clear()
