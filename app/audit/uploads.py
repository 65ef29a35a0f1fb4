"""
Uploaded file handling.

PDF and PowerPoint files go to the model as inline data (file mode).
Everything else is read as UTF-8 text and analyzed like pasted text.
"""

import base64
from dataclasses import dataclass
from typing import Optional

from app.models import InputMode

EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".txt": "text/plain",
    ".md": "text/markdown",
}
DEFAULT_MIME_TYPE = "application/octet-stream"
BINARY_EXTENSIONS = (".pdf", ".ppt", ".pptx")


class UploadError(ValueError):
    """Upload cannot be analyzed (e.g. undecodable text file)."""
    pass


@dataclass
class PreparedUpload:
    """Upload converted into analysis arguments."""
    content: str
    mode: InputMode
    mime_type: Optional[str] = None
    file_name: Optional[str] = None


def guess_mime_type(filename: Optional[str], declared: Optional[str] = None) -> str:
    """Declared type wins; otherwise guess from the extension."""
    if declared and declared != DEFAULT_MIME_TYPE:
        return declared
    name = (filename or "").lower()
    for extension, mime_type in EXTENSION_MIME_TYPES.items():
        if name.endswith(extension):
            return mime_type
    return declared or DEFAULT_MIME_TYPE


def is_binary_upload(filename: Optional[str], mime_type: Optional[str]) -> bool:
    mime_type = mime_type or ""
    name = (filename or "").lower()
    return (
        mime_type == "application/pdf"
        or "powerpoint" in mime_type
        or "presentation" in mime_type
        or name.endswith(BINARY_EXTENSIONS)
    )


def prepare_upload(
    filename: Optional[str], data: bytes, declared_type: Optional[str] = None
) -> PreparedUpload:
    """
    Turn raw upload bytes into analysis arguments.

    Raises:
        UploadError: If the file is empty or a text file is not UTF-8
    """
    if not data:
        raise UploadError("Uploaded file is empty")

    mime_type = guess_mime_type(filename, declared_type)
    if is_binary_upload(filename, mime_type):
        return PreparedUpload(
            content=base64.b64encode(data).decode("ascii"),
            mode=InputMode.FILE,
            mime_type=mime_type,
            file_name=filename,
        )

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UploadError(f"Could not read {filename or 'file'} as text: {e.reason}") from e

    return PreparedUpload(content=text, mode=InputMode.TEXT, file_name=filename)
