"""Request validation utilities"""

from dataclasses import dataclass
from typing import Optional

from werkzeug.exceptions import (
    BadRequest,
    Forbidden,
    MethodNotAllowed,
    RequestEntityTooLarge,
)
from werkzeug.http import parse_options_header
from werkzeug.sansio.multipart import Data, Epilogue, File, MultipartDecoder


@dataclass(frozen=True)
class Attachment:
    """The single uploaded file selected for conversion"""

    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def validate_method(method: str) -> None:
    """
    Only POST requests are accepted

    Raises:
        MethodNotAllowed: For any other method
    """
    if method.upper() != "POST":
        raise MethodNotAllowed(valid_methods=["POST"], description="Method Not Allowed")


def validate_origin(
    origin: Optional[str],
    referer: Optional[str],
    allowed_origin: str,
) -> None:
    """
    Check the request comes from the allowed origin

    The Origin header must match exactly, or the Referer must start with the
    allowed origin. Both headers are client supplied, so this only keeps
    browsers on other sites from using the endpoint.

    Raises:
        Forbidden: If neither header matches
    """
    if origin is not None and origin == allowed_origin:
        return
    if referer is not None and referer.startswith(allowed_origin):
        return
    raise Forbidden("Invalid origin")


def parse_multipart_boundary(content_type: Optional[str]) -> str:
    """
    Extract the boundary parameter from a multipart/form-data Content-Type

    Args:
        content_type: Raw Content-Type header value

    Returns:
        The boundary string

    Raises:
        BadRequest: If the content type is wrong or has no boundary
    """
    content_type = content_type or ""
    if not content_type.startswith("multipart/form-data"):
        raise BadRequest("Invalid content type")

    _, options = parse_options_header(content_type)
    boundary = options.get("boundary")
    if not boundary:
        raise BadRequest("Missing boundary in multipart/form-data")
    return boundary


def extract_attachment(body: bytes, boundary: str, extension: str) -> Attachment:
    """
    Find the first file part whose filename ends with the given extension

    Parts are scanned in body order and parsing stops at the first match,
    later parts are never read.

    Args:
        body: Raw request body
        boundary: Multipart boundary from the Content-Type header
        extension: Expected filename suffix, matched case-sensitively

    Returns:
        The selected attachment

    Raises:
        BadRequest: If no part matches or the body cannot be parsed
    """
    delimiter = b"--" + boundary.encode("latin-1")
    decoder = MultipartDecoder(delimiter[2:])
    decoder.receive_data(_close_multipart(body, delimiter))
    decoder.receive_data(None)

    filename = None
    chunks = []
    try:
        event = decoder.next_event()
        while not isinstance(event, Epilogue):
            if isinstance(event, File):
                filename = event.filename if event.filename.endswith(extension) else None
                chunks = []
            elif isinstance(event, Data):
                if filename is not None:
                    chunks.append(event.data)
                    if not event.more_data:
                        return Attachment(filename=filename, content=b"".join(chunks))
            else:
                filename = None
            event = decoder.next_event()
    except ValueError:
        raise BadRequest("Malformed multipart body")

    label = extension.lstrip(".").upper()
    raise BadRequest(f"{label} file not found in request")


def _close_multipart(body: bytes, delimiter: bytes) -> bytes:
    """Add the closing delimiter when the client left it off"""
    if delimiter not in body or delimiter + b"--" in body:
        return body
    stripped = body.rstrip()
    if stripped.endswith(delimiter):
        return stripped + b"--\r\n"
    return body + b"\r\n" + delimiter + b"--\r\n"


def validate_attachment_size(attachment: Attachment, max_bytes: int) -> None:
    """
    Raises:
        RequestEntityTooLarge: If the attachment is bigger than max_bytes
    """
    if attachment.size > max_bytes:
        raise RequestEntityTooLarge(f"File too large (max {max_bytes // 1024} KB)")
