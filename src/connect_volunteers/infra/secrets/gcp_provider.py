from __future__ import annotations

import logging

from google.api_core import exceptions as gcp_exceptions

from connect_volunteers.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


class SecretManagerProvider:
    """Lê a versão `latest` de cada segredo no Google Cloud Secret Manager.

    Requer Application Default Credentials com permissão secretAccessor.
    """

    def __init__(self, project_id: str, client=None) -> None:
        self._project_id = project_id
        self._client = client

    def _get_client(self):
        if self._client is None:
            from google.cloud import secretmanager

            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def secret_path(self, name: str) -> str:
        return f"projects/{self._project_id}/secrets/{name}/versions/latest"

    def read(self, name: str) -> str | None:
        try:
            response = self._get_client().access_secret_version(name=self.secret_path(name))
        except gcp_exceptions.NotFound:
            logger.warning("secret_not_found", extra={"secret_name": name})
            return None
        except Exception as e:
            logger.error(
                "secret_manager_failed",
                extra={"secret_name": name, "error_type": type(e).__name__},
            )
            raise RuntimeError(f"Não foi possível acessar secret {name}") from e

        return response.payload.data.decode("utf-8")
