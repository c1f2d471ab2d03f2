"""
Pydantic models for the AWS API Gateway v1 (REST API) proxy event.

Only the fields the upload handler reads are declared; anything else the
gateway sends is kept as extra data and ignored.
"""

from pydantic import BaseModel, ConfigDict, Field


class ApiGatewayRequestContext(BaseModel):
    """API Gateway Request Context object."""

    requestId: str | None = None
    stage: str | None = None
    path: str | None = None

    model_config = ConfigDict(extra="allow")


class APIGatewayProxyEvent(BaseModel):
    """AWS API Gateway Proxy Integration (v1) event as received by the handler."""

    resource: str | None = None
    path: str | None = None
    httpMethod: str | None = None
    headers: dict[str, str] | None = None
    multiValueHeaders: dict[str, list[str]] | None = None
    requestContext: ApiGatewayRequestContext = Field(default_factory=ApiGatewayRequestContext)
    body: str | None = None
    isBase64Encoded: bool = False

    model_config = ConfigDict(extra="allow")

    def flat_headers(self) -> dict[str, str]:
        """Single-valued headers, falling back to the first multi-value entry."""
        if self.headers:
            return dict(self.headers)
        return {name: values[0] for name, values in (self.multiValueHeaders or {}).items() if values}
