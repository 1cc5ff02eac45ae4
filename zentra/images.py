from __future__ import annotations

import base64
import mimetypes
from typing import Any, Optional


def to_data_url(data: bytes, mime: str = "application/octet-stream") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def uploaded_file_to_data_url(file: Any) -> str:
    """
    Inline an uploaded image as a ``data:`` URL so it can be stored in a record.

    Works with Streamlit's ``UploadedFile`` (``getvalue``/``type``/``name``)
    and plain binary file objects.
    """
    if file is None:
        raise ValueError("No file provided")

    try:
        data = file.getvalue() if hasattr(file, "getvalue") else file.read()
    except Exception as e:
        raise ValueError("Failed to read file") from e

    mime: Optional[str] = getattr(file, "type", None)
    if not mime:
        mime = mimetypes.guess_type(getattr(file, "name", "") or "")[0]
    return to_data_url(data, mime or "application/octet-stream")
