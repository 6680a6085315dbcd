"""Direct transport: a JSON request description posted over HTTP."""

from pydantic import BaseModel, StrictStr, ValidationError
from pydantic_core import PydanticSerializationError

from core.encoding import decode_body, encode_body
from core.exceptions import DecodeError, EncodeError, ProxyError
from core.request_types import RequestSpec, ResponseSpec

from .validation import describe_validation_error


class DirectRequest(BaseModel):
    method: StrictStr
    url: StrictStr
    body: StrictStr | None = None
    headers: dict[str, StrictStr] | None = None


class DirectResponse(BaseModel):
    status_code: int
    headers: dict[str, str]
    content: str


class DirectCodec:
    """Codec for ``{method, url, body, headers}`` documents.

    Success payloads are JSON bytes; error payloads are plain text bytes.
    """

    name = "direct"

    def decode(self, payload: bytes | str) -> RequestSpec:
        try:
            request = DirectRequest.model_validate_json(payload)
        except ValidationError as e:
            raise DecodeError(describe_validation_error(e)) from e

        return RequestSpec(
            method=request.method,
            target=request.url,
            body=decode_body(request.body or ""),
            headers=dict(request.headers or {}),
        )

    def encode(self, response: ResponseSpec) -> bytes:
        try:
            document = DirectResponse(
                status_code=response.status_code,
                headers=response.headers,
                content=encode_body(response.body),
            )
            return document.model_dump_json().encode() + b"\n"
        except (ValidationError, PydanticSerializationError) as e:
            raise EncodeError(f"Error encoding response: {e}") from e

    def encode_error(self, error: ProxyError) -> bytes:
        return f"{error.public_message}\n".encode()
