"""Tests for the response builder."""

import orjson
import pytest

from app.api.responses import build_response
from app.core.errors import (
    Base64DecodeError,
    MalformedContentTypeError,
    MalformedPartHeadersError,
    MissingContentTypeError,
    NoPartsError,
    NotEncodedError,
    StorageError,
    TruncatedMultipartError,
)
from app.models.core import UploadResult


class TestBuildResponse:
    """Tests for build_response mapping."""

    def test_success_is_201_with_uuid(self) -> None:
        result = UploadResult(id="abc-123", byte_length=3, content_type="multipart/form-data", receipt=None)
        response = build_response(result)

        assert response.statusCode == 201
        assert response.headers["Content-Type"] == "application/json"
        assert orjson.loads(response.body) == {"status": "uploaded", "uuid": "abc-123"}

    @pytest.mark.parametrize(
        "error",
        [
            NotEncodedError("raw body"),
            Base64DecodeError("bad padding"),
            MissingContentTypeError("no header"),
            MalformedContentTypeError("no boundary"),
            NoPartsError("no parts"),
            TruncatedMultipartError("cut"),
            MalformedPartHeadersError("no blank line"),
        ],
    )
    def test_client_errors_are_400_with_empty_body(self, error: Exception) -> None:
        response = build_response(error)
        assert response.statusCode == 400
        assert response.body == ""

    @pytest.mark.parametrize(
        "error",
        [StorageError("timeout", bucket="b", key="k"), RuntimeError("boom"), KeyError("x")],
    )
    def test_backend_and_unexpected_errors_are_500(self, error: Exception) -> None:
        response = build_response(error)
        assert response.statusCode == 500
        assert response.body == ""

    def test_dump_matches_proxy_shape(self) -> None:
        dumped = build_response(NoPartsError("none")).model_dump()
        assert dumped == {"statusCode": 400, "headers": {}, "body": ""}
