"""API gateway transport: invocation events in, event responses out."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from core.encoding import decode_body, encode_body
from core.exceptions import DecodeError, EncodeError, ProxyError
from core.query import parse_query_string
from core.request_types import RequestSpec, ResponseSpec

from .validation import describe_validation_error


class _EventModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class EventIdentity(_EventModel):
    secret_id: str | None = Field(default=None, alias="secretId")


class EventRequestContext(_EventModel):
    """Gateway metadata about the call; carried but not used for forwarding."""

    service_id: str | None = Field(default=None, alias="serviceId")
    request_id: str | None = Field(default=None, alias="requestId")
    http_method: str | None = Field(default=None, alias="httpMethod")
    path: str | None = None
    source_ip: str | None = Field(default=None, alias="sourceIp")
    stage: str | None = None
    identity: EventIdentity = Field(default_factory=EventIdentity)


class EventRequest(_EventModel):
    headers: dict[str, StrictStr] | None = None
    http_method: StrictStr = Field(alias="httpMethod")
    path: StrictStr
    query_string: dict[str, list[str]] = Field(default_factory=dict, alias="queryString")
    body: StrictStr | None = None
    request_context: EventRequestContext | None = Field(default=None, alias="requestContext")

    @field_validator("query_string", mode="before")
    @classmethod
    def _parse_query_string(cls, value: Any) -> dict[str, list[str]]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"unexpected query string: {value!r}")
        return parse_query_string(value)


class EventResponse(_EventModel):
    model_config = ConfigDict(populate_by_name=True)

    is_base64_encoded: bool = Field(alias="isBase64Encoded")
    status_code: int = Field(alias="statusCode")
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class GatewayCodec:
    """Codec for API gateway invocation events.

    The response body is always base64 text; ``base64_flag`` only sets the
    ``isBase64Encoded`` field reported alongside it.
    """

    name = "gateway"

    def __init__(self, base64_flag: bool = False) -> None:
        self.base64_flag = base64_flag

    def decode(self, payload: dict[str, Any] | bytes | str) -> RequestSpec:
        try:
            if isinstance(payload, (bytes, str)):
                event = EventRequest.model_validate_json(payload)
            else:
                event = EventRequest.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(describe_validation_error(e)) from e

        return RequestSpec(
            method=event.http_method,
            target=event.path,
            body=decode_body(event.body or ""),
            headers=dict(event.headers or {}),
            query=event.query_string,
        )

    def encode(self, response: ResponseSpec) -> dict[str, Any]:
        try:
            document = EventResponse(
                is_base64_encoded=self.base64_flag,
                status_code=response.status_code,
                headers=response.headers,
                body=encode_body(response.body),
            )
        except ValidationError as e:
            raise EncodeError(f"Error encoding response: {e}") from e
        return document.model_dump(by_alias=True)

    def encode_error(self, error: ProxyError) -> dict[str, Any]:
        document = EventResponse(is_base64_encoded=False, status_code=error.status_code)
        return document.model_dump(by_alias=True)
