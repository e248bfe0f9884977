"""
Error envelope returned by every failed request.

    {
      "statusCode": 404,
      "timestamp": "2024-05-01T12:00:00.000Z",
      "path": "/api/v1/audits/01HX...",
      "message": "Record not found for the specified operation.",
      "details": null,
      "errorId": "01HX..."          # only on 5xx responses
    }

Non-500 envelopes may carry extra public fields (e.g. `errors` for
validation failures).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

SERVER_ERROR_THRESHOLD = 500
RESERVED_FIELDS = frozenset(
    {"statusCode", "timestamp", "path", "message", "details", "errorId"}
)


class ErrorEnvelope(BaseModel):
    """Stable wire contract for API failures."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    status_code: int = Field(alias="statusCode")
    timestamp: str
    path: str
    message: str | dict[str, Any]
    details: dict[str, Any] | None = None
    error_id: str | None = Field(default=None, alias="errorId")

    @model_validator(mode="after")
    def _error_id_only_on_server_errors(self) -> "ErrorEnvelope":
        is_server_error = self.status_code >= SERVER_ERROR_THRESHOLD
        if is_server_error != (self.error_id is not None):
            raise ValueError("errorId must be present if and only if statusCode is 5xx")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON body, omitting errorId on client errors."""
        body = self.model_dump(by_alias=True, mode="json")
        if self.error_id is None:
            body.pop("errorId", None)
        return body
