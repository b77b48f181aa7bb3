"""Service identity credentials.

Resolution order for the api secret:
1. `environment == "local"` -> fixed local secret, no store lookup.
2. `service_secret` set in settings -> used verbatim.
3. Otherwise the `SecretStore` is asked for `service_name`; the document's
   `apiSecret` field is the secret.

The first successful resolution is kept for the lifetime of the provider.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from servicecall.core.config import ServiceCallSettings
from servicecall.core.domain.errors import CallError
from servicecall.core.interfaces.secrets import SecretStore

LOCAL_SECRET_VALUE = "local-environment-secret"

HEADER_API_KEY = "x-api-key"
HEADER_API_SECRET = "x-api-secret"


class CredentialProvider:
    def __init__(self, settings: ServiceCallSettings, secret_store: SecretStore | None = None) -> None:
        self._settings = settings
        self._secret_store = secret_store
        self._secret: str | None = None

    @property
    def secret(self) -> str | None:
        return self._secret

    async def get_secret(self) -> str:
        if self._secret is not None:
            return self._secret

        if self._settings.is_local:
            self._secret = LOCAL_SECRET_VALUE
        elif self._settings.service_secret:
            self._secret = self._settings.service_secret
        else:
            self._secret = await self._fetch_from_store()

        return self._secret

    async def _fetch_from_store(self) -> str:
        name = self._settings.service_name
        if self._secret_store is None or not name:
            logger.warning("No secret store or service name configured; cannot resolve api secret")
            raise CallError.secret_missing()

        try:
            document = await self._secret_store.get_secret(name)
        except CallError:
            raise
        except Exception as exc:
            logger.warning("Secret store lookup for {} failed: {}", name, exc)
            raise CallError.secret_missing(exc) from exc

        value = _extract_api_secret(document)
        if not value:
            logger.warning("Secret for {} has no usable apiSecret", name)
            raise CallError.secret_missing()
        return value

    async def headers(self, api_key_user: str | None = None) -> dict[str, str]:
        """Credential headers: `x-api-key` and `x-api-secret`."""

        api_key = f"service-{self._settings.service_name}"
        if api_key_user:
            api_key = f"{api_key}_user-{api_key_user}"

        return {
            HEADER_API_KEY: api_key,
            HEADER_API_SECRET: await self.get_secret(),
        }


def _extract_api_secret(document: Any) -> str | None:
    if isinstance(document, Mapping):
        value = document.get("apiSecret")
        if isinstance(value, str) and value:
            return value
    return None
