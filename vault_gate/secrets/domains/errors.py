"""Exceptions raised while resolving secrets."""
from typing import Optional


class VaultGateError(Exception):
    """Base class for secret resolution errors."""
    pass


class TransportError(VaultGateError):
    """Secret store request failed."""

    def __init__(self, path: str, status_code: Optional[int] = None, body: str = ""):
        self.path = path
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Request to {path} failed: {body}"
        else:
            message = f"Request to {path} failed with status {status_code}: {body.strip()}"
        super().__init__(message)


class SecretNotFoundError(VaultGateError):
    """Secret path does not exist in the store."""

    def __init__(self, path: str, detail: str = ""):
        self.path = path
        super().__init__(
            f'Unable to retrieve result for "{path}" because it was not found: {detail.strip()}'
        )


class SelectorNotFoundError(VaultGateError):
    """Selector matched nothing in the secret payload."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(
            f"Unable to retrieve result for {selector}. No match data was found. "
            f"Double check your Key or Selector."
        )


class SecretRequestError(VaultGateError):
    """Secrets input could not be parsed into requests."""
    pass
