"""Transport decoding: base64 request bodies and the multipart boundary parameter."""

import base64
import binascii
import re
from collections.abc import Iterator, Mapping

from beartype import beartype

from app.core.errors import (
    Base64DecodeError,
    MalformedContentTypeError,
    MissingContentTypeError,
    NotEncodedError,
)

CONTENT_TYPE_HEADER = "content-type"
BOUNDARY_PATTERN = re.compile(rb"[ -~]{0,199}[!-~]")


@beartype
def decode_body(body: bytes | str, is_encoded: bool) -> bytes:
    """Decode a standard base64 request body. Raw (non-encoded) bodies are refused."""
    if not is_encoded:
        raise NotEncodedError("Expected request body to be base64 encoded")

    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise Base64DecodeError(f"Request body is not valid base64: {ex}") from ex


def _split_params(value: str) -> Iterator[str]:
    """Split a header value on ';' while leaving quoted strings intact."""
    while value[:1] == ";":
        value = value[1:]
        end = value.find(";")
        while end > 0 and (value.count('"', 0, end) - value.count('\\"', 0, end)) % 2:
            end = value.find(";", end + 1)
        if end < 0:
            end = len(value)
        yield value[:end].strip()
        value = value[end:]


def parse_header_params(value: str) -> tuple[str, dict[str, str]]:
    """Parse a Content-Type like header into its main value and a dict of parameters.

    Parameter names are lower-cased; quoted values are unquoted.
    """
    params = _split_params(";" + value)
    key = next(params).lower()
    parsed: dict[str, str] = {}
    for param in params:
        name, sep, raw = param.partition("=")
        if not sep:
            continue
        raw = raw.strip()
        if len(raw) >= 2 and raw[0] == raw[-1] == '"':
            raw = raw[1:-1].replace("\\\\", "\\").replace('\\"', '"')
        parsed[name.strip().lower()] = raw
    return key, parsed


@beartype
def extract_boundary(headers: Mapping[str, str]) -> bytes:
    """Return the multipart boundary (without the leading '--') from the Content-Type header.

    Header names are matched case-insensitively.
    """
    content_type = next(
        (value for name, value in headers.items() if name.lower() == CONTENT_TYPE_HEADER),
        None,
    )
    if content_type is None or not content_type.strip():
        raise MissingContentTypeError("Request is missing the Content-Type header")

    _, params = parse_header_params(content_type)
    boundary = params.get("boundary", "")
    if not boundary:
        raise MalformedContentTypeError(f"No boundary parameter in Content-Type: {content_type!r}")

    try:
        encoded = boundary.encode("ascii")
    except UnicodeEncodeError as ex:
        raise MalformedContentTypeError(f"Boundary is not ASCII: {boundary!r}") from ex

    if BOUNDARY_PATTERN.fullmatch(encoded) is None:
        raise MalformedContentTypeError(f"Invalid boundary in Content-Type: {boundary!r}")
    return encoded
