"""HTTP client for reading secrets from Vault."""
import logging
from typing import Dict, Optional, Union

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)


class VaultClient:
    """Thin wrapper around a requests session pointed at a Vault server."""

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        namespace: Optional[str] = None,
        verify: Union[bool, str] = True,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.url = url.rstrip("/")
        self.token = token
        self.namespace = namespace
        self.verify = verify
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._session: Optional[requests.Session] = None

    @classmethod
    def from_config(cls, config) -> "VaultClient":
        """Build a client from a loaded VaultGateConfig."""
        return cls(
            url=config.url,
            token=config.token,
            namespace=config.namespace,
            verify=config.ca_cert or config.verify_tls,
            timeout=config.timeout,
            headers=config.headers,
        )

    @property
    def session(self) -> requests.Session:
        """Lazy-initialize session."""
        if self._session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            if self.token:
                session.headers["X-Vault-Token"] = self.token
            if self.namespace:
                session.headers["X-Vault-Namespace"] = self.namespace
            session.verify = self.verify
            self._session = session
        return self._session

    def get(self, path: str) -> str:
        """
        Read a path from Vault.

        Args:
            path: Path relative to the server URL, e.g. v1/secret/data/ci

        Returns:
            Raw response body

        Raises:
            TransportError: On connection failure or a non-2xx response
        """
        url = f"{self.url}/{path.lstrip('/')}"
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(path, None, str(e)) from e

        if not response.ok:
            raise TransportError(path, response.status_code, response.text)
        return response.text

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
