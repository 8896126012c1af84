"""Parse the multi-secret input string into secret requests.

Each entry has the form ``<path> <selector> [| <name>]`` and entries are
separated by ``;`` or newlines, for example::

    secret/data/ci npm_token | NPM_TOKEN ;
    secret/data/ci/aws * | AWS_
"""
import logging
import re
from typing import List

import jsonata

from ..domains.errors import SecretRequestError
from ..domains.models import WILDCARD, WILDCARD_UPPERCASE, SecretRequest
from ..domains.naming import normalize_output_key
from ..domains.selectors import is_simple_selector

logger = logging.getLogger(__name__)

_ENTRY_SEPARATOR = re.compile(r"[;\n]")


def parse_secrets_input(secrets_input: str) -> List[SecretRequest]:
    """
    Parse secrets input into requests.

    Raises:
        SecretRequestError: If an entry is malformed
    """
    requests = []
    entries = [entry.strip() for entry in _ENTRY_SEPARATOR.split(secrets_input or "")]

    for entry in entries:
        if not entry:
            continue

        path_spec = entry
        output_var_name = None
        rename_index = entry.rfind("|")
        if rename_index > -1:
            path_spec = entry[:rename_index].strip()
            output_var_name = entry[rename_index + 1:].strip()
            if not output_var_name:
                raise SecretRequestError(
                    f'You must provide a value when mapping a secret to a name. Input: "{entry}"'
                )

        path_parts = path_spec.split()
        if len(path_parts) != 2:
            raise SecretRequestError(f'You must provide a valid path and key. Input: "{entry}"')

        path, selector_quoted = path_parts
        selector = selector_quoted.replace('"', "")
        wildcard = selector in (WILDCARD, WILDCARD_UPPERCASE)

        try:
            simple = wildcard or is_simple_selector(selector_quoted)
        except jsonata.JException as e:
            raise SecretRequestError(f'Invalid selector "{selector_quoted}": {e}. Input: "{entry}"') from e

        if not simple and not output_var_name:
            raise SecretRequestError(
                f'You must provide a name for the output key when using json selectors. Input: "{entry}"'
            )

        if output_var_name:
            env_var_name = output_var_name
        else:
            output_var_name = normalize_output_key(selector)
            env_var_name = normalize_output_key(selector, upper_case=True)

        requests.append(SecretRequest(
            path=path,
            selector=selector,
            output_var_name=output_var_name,
            env_var_name=env_var_name,
            use_key_as_name=wildcard and rename_index == -1,
        ))

    logger.debug(f"Parsed {len(requests)} secret request(s)")
    return requests
