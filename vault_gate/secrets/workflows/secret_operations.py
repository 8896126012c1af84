"""Workflow resolving a batch of secret requests against Vault.

Requests are resolved one after another in input order. Response bodies are
cached per path for the duration of one call, so a secret referenced several
times is only fetched once. Every payload, cached or not, must pass the
authorization gate: a single denial returns an empty result list for the
whole batch.
"""
import json
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ..domains.authorization import is_allowed
from ..domains.errors import SecretNotFoundError, TransportError
from ..domains.models import (
    RESERVED_KEY_PREFIXES,
    AuthorizationContext,
    SecretPayload,
    SecretRequest,
    SecretResult,
)
from ..domains.naming import normalize_output_key
from ..domains.selectors import build_selector, escape_key, select_data

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretTransport(Protocol):
    """Anything that can read a store path, such as VaultClient."""

    def get(self, path: str) -> str:
        """Return the raw body for path, raising TransportError on failure."""
        ...


def _fetch(client: SecretTransport, request_path: str, ignore_not_found: bool, path: str) -> Optional[str]:
    """Fetch a body, returning None for an ignored missing secret."""
    try:
        return client.get(request_path)
    except TransportError as e:
        if e.status_code != 404:
            raise
        error = SecretNotFoundError(path, e.body)
        if ignore_not_found:
            logger.error(f"✘ {error}")
            return None
        raise error from e


def expand_wildcard(
    request: SecretRequest,
    payload: SecretPayload,
    cached_response: bool = False,
) -> List[SecretResult]:
    """
    Resolve every value key of a secret for a wildcard request.

    Authorization attributes are skipped. Derived names are either the key
    itself or the request's names with the key appended.
    """
    results = []
    for key in payload.values:
        if key.startswith(RESERVED_KEY_PREFIXES):
            continue

        if request.use_key_as_name:
            output_var_name = env_var_name = key
        else:
            output_var_name = request.output_var_name + key
            env_var_name = request.env_var_name + key

        derived = replace(
            request,
            selector=key,
            output_var_name=normalize_output_key(output_var_name),
            env_var_name=normalize_output_key(env_var_name, request.upper_case_env),
            use_key_as_name=False,
        )
        selector = build_selector(escape_key(key), payload.body)
        value = select_data(payload.body, selector)
        results.append(SecretResult(request=derived, value=value, cached_response=cached_response))
    return results


def get_secrets(
    secret_requests: Iterable[SecretRequest],
    client: SecretTransport,
    context: Optional[AuthorizationContext] = None,
    ignore_not_found: bool = False,
) -> List[SecretResult]:
    """
    Resolve secret requests in order.

    Args:
        secret_requests: Requests to resolve
        client: Transport exposing get(path) -> body
        context: Caller identity (read from the environment if not provided)
        ignore_not_found: Skip requests whose path does not exist instead of failing

    Returns:
        Results in request order, or an empty list if any secret denies access

    Raises:
        SecretNotFoundError: Path missing and ignore_not_found is off
        TransportError: Any other failed request
        SelectorNotFoundError: A selector matched nothing
    """
    if context is None:
        context = AuthorizationContext.from_env()

    # Per-call cache: {request_path -> raw body}
    response_cache: Dict[str, str] = {}
    results: List[SecretResult] = []

    for secret_request in secret_requests:
        request_path = f"v1/{secret_request.path}"
        cached_response = request_path in response_cache
        if cached_response:
            logger.debug(f"Using cached response for {request_path}")
            body = response_cache[request_path]
        else:
            body = _fetch(client, request_path, ignore_not_found, secret_request.path)
            if body is None:
                continue
            response_cache[request_path] = body

        payload = SecretPayload(json.loads(body))
        if not is_allowed(payload.values, context):
            return []

        if secret_request.is_wildcard:
            results.extend(expand_wildcard(secret_request, payload, cached_response))
        else:
            selector = build_selector(secret_request.selector, payload.body)
            value = select_data(payload.body, selector)
            results.append(SecretResult(
                request=secret_request,
                value=value,
                cached_response=cached_response,
            ))

    return results
