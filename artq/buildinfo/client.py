"""HTTP client for publishing build info to the repository server."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from artq import __version__
from artq.exceptions import ServerConnectionError, ServerRejectionError

logger = logging.getLogger(__name__)

_USER_AGENT = f"artq/{__version__}"
_REQUEST_TIMEOUT = 30
_BUILD_INFO_CONTENT_TYPE = "application/vnd.org.jfrog.artifactory+json"
_PUBLISH_SUCCESS_STATUS = 204


def _indent_body(body: str) -> str:
    """Pretty-print a JSON response body, leaving other text unchanged."""
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return body


class BuildInfoClient:
    """Client for the server's build info endpoint.

    Args:
        url: Server base URL ending in ``/``.
        user: User name for basic authentication.
        password: Password for basic authentication.
        api_key: API key; takes precedence over basic authentication.
    """

    def __init__(
        self,
        url: str,
        user: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
    ) -> None:
        self.url = url if url.endswith("/") else url + "/"
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": _USER_AGENT})
        if api_key:
            self._session.headers.update({"X-JFrog-Art-Api": api_key})
        elif user:
            self._session.auth = (user, password or "")

    def build_url(self, build_name: str, build_number: str) -> str:
        """Return the browsable URL of a published build."""
        return f"{self.url}webapp/builds/{build_name}/{build_number}"

    def publish(self, build_info: dict[str, Any]) -> None:
        """Send a build info document.

        Raises:
            ServerConnectionError: If the request fails without a response.
            ServerRejectionError: If the server answers with any status but 204.
        """
        endpoint = f"{self.url}api/build/"
        logger.info("Deploying build info to %s", endpoint)
        try:
            resp = self._session.put(
                endpoint,
                data=json.dumps(build_info),
                headers={"Content-Type": _BUILD_INFO_CONTENT_TYPE},
                timeout=_REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise ServerConnectionError(f"Request to {endpoint} failed: {e}") from e

        if resp.status_code != _PUBLISH_SUCCESS_STATUS:
            raise ServerRejectionError(resp.status_code, _indent_body(resp.text))
        logger.debug("Server response: HTTP %d", resp.status_code)
