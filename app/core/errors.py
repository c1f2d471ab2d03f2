"""Error taxonomy for the upload pipeline.

Client input errors map to HTTP 400, backend errors to HTTP 500.
"""

from enum import StrEnum

from robyn import status_codes


class ErrorKind(StrEnum):
    """Every failure the upload pipeline can report."""

    NOT_ENCODED = "not_encoded"
    DECODE_ERROR = "decode_error"
    MISSING_CONTENT_TYPE = "missing_content_type"
    MALFORMED_CONTENT_TYPE = "malformed_content_type"
    NO_PARTS = "no_parts"
    TRUNCATED_MULTIPART = "truncated_multipart"
    MALFORMED_PART_HEADERS = "malformed_part_headers"
    STORAGE_ERROR = "storage_error"


class UploadError(Exception):
    """Base exception for all upload pipeline errors."""

    kind: ErrorKind
    status_code: int = status_codes.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ClientInputError(UploadError):
    """The request itself is unusable."""

    status_code = status_codes.HTTP_400_BAD_REQUEST


class BackendError(UploadError):
    """A collaborator failed while handling a valid request."""


class NotEncodedError(ClientInputError):
    kind = ErrorKind.NOT_ENCODED


class Base64DecodeError(ClientInputError):
    kind = ErrorKind.DECODE_ERROR


class MissingContentTypeError(ClientInputError):
    kind = ErrorKind.MISSING_CONTENT_TYPE


class MalformedContentTypeError(ClientInputError):
    kind = ErrorKind.MALFORMED_CONTENT_TYPE


class NoPartsError(ClientInputError):
    kind = ErrorKind.NO_PARTS


class TruncatedMultipartError(ClientInputError):
    kind = ErrorKind.TRUNCATED_MULTIPART


class MalformedPartHeadersError(ClientInputError):
    kind = ErrorKind.MALFORMED_PART_HEADERS


class StorageError(BackendError):
    """Raised when the object store rejects or fails a write."""

    kind = ErrorKind.STORAGE_ERROR

    def __init__(self, message: str, bucket: str, key: str) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(f"Storage write to '{bucket}/{key}' failed: {message}")
