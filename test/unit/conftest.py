"""Test fixtures for cover-upload-api unit tests."""

import base64
import itertools
from dataclasses import dataclass, field

import pytest

from app.core.lifespan import State
from app.models.core import RawRequest
from app.services.upload import UploadService
from app.storage.local import InMemoryObjectStorage

BUCKET = "test-bucket"


# -----------------------------------------------------------------------------
# Multipart builders
# -----------------------------------------------------------------------------


def build_multipart(
    boundary: bytes,
    parts: list[tuple[bytes, bytes]],
    preamble: bytes = b"",
    epilogue: bytes = b"",
    terminate: bool = True,
) -> bytes:
    """Assemble a multipart body from (header block, body) pairs."""
    out = bytearray(preamble)
    for index, (headers, body) in enumerate(parts):
        if index or preamble:
            out += b"\r\n"
        header_block = headers + b"\r\n" if headers else b""
        out += b"--" + boundary + b"\r\n" + header_block + b"\r\n" + body
    if terminate:
        out += b"\r\n--" + boundary + b"--" + epilogue
    return bytes(out)


def file_headers(name: str = "file", filename: str = "cover.png") -> bytes:
    return f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\nContent-Type: image/png'.encode()


def encoded_request(payload: bytes, boundary: str = "XYZ", **overrides) -> RawRequest:
    """Base64-encode ``payload`` into a RawRequest with a multipart Content-Type."""
    values = {
        "body": base64.b64encode(payload).decode(),
        "is_base64_encoded": True,
        "headers": {"Content-Type": f"multipart/form-data; boundary={boundary}"},
    }
    values.update(overrides)
    return RawRequest(**values)


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request (case-insensitive like Robyn's)."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return {k.lower(): v for k, v in self._data.items()}.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: str | bytes = ""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/covers"


# -----------------------------------------------------------------------------
# Storage / service fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def memory_storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def upload_service(memory_storage: InMemoryObjectStorage, sequential_ids) -> UploadService:
    return UploadService(storage=memory_storage, bucket=BUCKET, id_factory=sequential_ids)


@pytest.fixture
def test_state(memory_storage: InMemoryObjectStorage) -> State:
    state = State()
    state.storage = memory_storage
    return state


@pytest.fixture
def global_dependencies(test_state: State) -> dict:
    yield {"state": test_state}
    test_state.clear()


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock HTTP requests."""

    def _make(body: str | bytes = "", headers: dict | None = None) -> MockRequest:
        return MockRequest(body=body, headers=MockHeaders(_data=dict(headers or {})))

    return _make
