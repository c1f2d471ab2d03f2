"""Router that tags every request with a correlation id and normalizes handler results."""

import inspect
import uuid
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from asgi_correlation_id import correlation_id
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from app.models.core import ProxyResponse

REQUEST_ID_HEADER = "x-request-id"


def resolve_request_id(request: Request) -> str:
    """Incoming request id header, or a fresh one."""
    headers = getattr(request, "headers", None)
    incoming = headers.get(REQUEST_ID_HEADER) if headers is not None else None
    return incoming or uuid.uuid4().hex


def parse_response(result: Any, headers: dict[str, str] | None = None) -> Response:
    """Convert handler result to Response, adding ``headers`` unless the handler built the Response itself."""
    extra = headers or {}
    match result:
        case Response():
            return result
        case ProxyResponse():
            return Response(
                status_code=result.statusCode,
                headers={**result.headers, **extra},
                description=result.body,
            )
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json", **extra},
                description=result.model_dump_json(),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json", **extra},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers=dict(extra),
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
)


def _create_method_wrapper(original_method: Callable) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            has_request_param = "request" in sig.parameters

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                request_id = resolve_request_id(request)
                token = correlation_id.set(request_id)
                try:
                    if has_request_param:
                        h_kwargs["request"] = request
                    result = await handler(**h_kwargs)
                finally:
                    correlation_id.reset(token)
                return parse_response(result, headers={REQUEST_ID_HEADER: request_id})

            # Robyn injects by parameter name: always expose request first
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            new_params.extend(param for name, param in sig.parameters.items() if name != "request")

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter whose handlers get a correlation id and may return models instead of Responses."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                setattr(self, method_name, _create_method_wrapper(getattr(self, method_name)))
