"""Photo staging for the create and edit dialogs."""

import asyncio
import base64
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from volunteer_board.domain.records import MAX_PHOTOS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagingResult:
    """How many files of a batch were staged and how many were dropped."""

    accepted: int
    dropped: int

    @property
    def message(self) -> str | None:
        """User notice when part of the batch did not fit."""
        if not self.dropped:
            return None
        return (
            f"Up to {MAX_PHOTOS} photos can be uploaded. "
            f"{self.accepted} photo(s) were added."
        )


async def stage_photos(
    staged: list[str], files: Sequence[bytes], capacity: int = MAX_PHOTOS
) -> StagingResult:
    """Convert as many files as still fit and append them to the staged list.

    Conversions run concurrently and append in completion order.
    """
    remaining = max(capacity - len(staged), 0)
    accepted = list(files[:remaining])
    dropped = len(files) - len(accepted)

    async def _convert(image_bytes: bytes) -> None:
        data_url = await asyncio.to_thread(to_data_url, image_bytes)
        staged.append(data_url)

    await asyncio.gather(*(_convert(image_bytes) for image_bytes in accepted))
    if dropped:
        logger.info(
            "Dropped photos over capacity",
            extra={"accepted": len(accepted), "dropped": dropped},
        )
    return StagingResult(accepted=len(accepted), dropped=dropped)


def remove_photo(staged: list[str], index: int) -> bool:
    """Remove a staged photo by position; return False when nothing is there."""
    if not 0 <= index < len(staged):
        logger.debug("No staged photo at index %s", index)
        return False
    del staged[index]
    return True


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for inline storage."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
