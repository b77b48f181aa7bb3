"""Discovery response payloads.

Both discovery variants answer with camelCase JSON. Two shapes exist:
- `{endpoint, httpMethod}`: one absolute URL.
- `{baseUrl, path, httpMethod | method, invocationTarget | lambdaName}`.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import EndpointDescriptor


class DiscoveryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    endpoint: str | None = None
    base_url: str | None = Field(default=None, alias="baseUrl")
    path: str | None = None
    http_method: str | None = Field(
        default=None,
        validation_alias=AliasChoices("httpMethod", "method", "http_method"),
    )
    invocation_target: str | None = Field(
        default=None,
        validation_alias=AliasChoices("invocationTarget", "lambdaName", "invocation_target"),
    )
    error_message: str | None = Field(default=None, alias="errorMessage")

    def to_descriptor(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        """Build the descriptor or raise EndpointNotFound when fields are missing."""

        verb = (self.http_method or "").strip().upper()

        if self.base_url and self.path:
            base_url, path = self.base_url, self.path
        elif self.endpoint:
            base_url, path = "", self.endpoint
        elif self.invocation_target and self.path:
            base_url, path = "", self.path
        else:
            base_url, path = "", ""

        if not path or not verb:
            raise CallError.endpoint_not_found(
                "Could not get base url, path or method. "
                f"Base url: {self.base_url or self.endpoint}, path: {self.path}, method: {self.http_method}"
            )

        try:
            return EndpointDescriptor(
                service=service,
                namespace=namespace,
                method=method,
                base_url=base_url,
                path=path,
                http_method=verb,
                invocation_target=self.invocation_target,
            )
        except ValidationError as exc:
            raise CallError.endpoint_not_found(
                f"Invalid endpoint for {service} - {namespace} - {method}: {exc.error_count()} invalid field(s)"
            ) from exc
