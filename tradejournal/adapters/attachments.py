"""
Reading screenshot attachments into embeddable data URIs.
"""
import base64
import logging
import mimetypes
from pathlib import Path

__all__ = ["read_screenshot", "AttachmentError"]

log = logging.getLogger(__name__)


class AttachmentError(Exception):
    """Raised when a screenshot file cannot be attached."""


# impure
def read_screenshot(path: Path) -> str:
    """
    Reads an image file completely and returns it as a `data:` URI.
    #impure: Reads from the filesystem.
    """
    path = Path(path)
    if not path.is_file():
        raise AttachmentError(f"Screenshot not found: {path}")

    mime, _ = mimetypes.guess_type(path.name)
    if mime is not None and not mime.startswith("image/"):
        raise AttachmentError(f"Screenshot must be an image file, got {mime}: {path}")

    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    log.info(f"Attached screenshot {path.name} ({len(payload)} base64 chars)")
    return f"data:{mime or 'application/octet-stream'};base64,{payload}"
