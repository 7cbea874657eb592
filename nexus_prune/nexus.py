from typing import Any, Dict, Optional
import logging

import requests

from .config import NexusSettings
from .errors import DeleteError, FetchError

logger = logging.getLogger(__name__)

COMPONENTS_PATH = "/service/rest/v1/components"


class NexusClient:
    """Thin wrapper around the two Nexus REST calls the cleanup needs."""

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (username, password)
        self.session.headers.update({"Accept": "application/json"})

    def __enter__(self) -> "NexusClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def list_components(
        self, repository: str, continuation_token: Optional[str] = None
    ) -> Dict[str, Any]:
        params = {"repository": repository}
        if continuation_token:
            params["continuationToken"] = continuation_token
        request_url = f"{self.url}{COMPONENTS_PATH}"
        logger.debug(f"Calling {request_url} with {params}")
        try:
            response = self.session.get(request_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as err:
            raise FetchError(f"Listing components of '{repository}' failed: {err}") from err
        except ValueError as err:
            raise FetchError(f"Listing for '{repository}' is not valid JSON: {err}") from err
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected listing payload for '{repository}': {type(data).__name__}")
        return data

    def delete_component(self, component_id: str) -> None:
        request_url = f"{self.url}{COMPONENTS_PATH}/{component_id}"
        logger.debug(f"Calling {request_url} with method DELETE")
        try:
            response = self.session.delete(request_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as err:
            raise DeleteError(component_id, str(err)) from err


def create_nexus_client(settings: NexusSettings) -> NexusClient:
    return NexusClient(
        settings.url,
        settings.username,
        settings.password,
        timeout=settings.timeout,
    )
