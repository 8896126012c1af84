"""JSONata selector evaluation against secret payloads."""
import json
import logging
from typing import Any, Dict

import jsonata
from jsonata import Utils

from .errors import SelectorNotFoundError

logger = logging.getLogger(__name__)


def _parse(selector: str):
    return jsonata.Jsonata(selector).ast


def is_single_step(selector: str) -> bool:
    """True for a one-step field path or a string literal."""
    ast = _parse(selector)
    return (ast.type == "path" and len(ast.steps) == 1) or ast.type == "string"


def is_simple_selector(selector: str) -> bool:
    """True for a field path without filters on its first step, or a string literal."""
    ast = _parse(selector)
    return (ast.type == "path" and not ast.steps[0].stages) or ast.type == "string"


def _with_null_values(value: Any) -> Any:
    """Copy of a parsed JSON document with null as JSONata's null, not undefined."""
    if value is None:
        return Utils.NULL_VALUE
    if isinstance(value, dict):
        return {k: _with_null_values(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_with_null_values(v) for v in value]
    return value


def _json_default(value: Any) -> Any:
    if value is Utils.NULL_VALUE:
        return None
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _to_json(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)


def _evaluate(document: Any, selector: str) -> Any:
    expression = jsonata.Jsonata(selector)
    expression.set_output_convert_nulls(False)
    return expression.evaluate(document)


def select_data(payload: Dict[str, Any], selector: str) -> str:
    """
    Evaluate a JSONata selector against a secret payload.

    Args:
        payload: Parsed secret body
        selector: JSONata expression

    Returns:
        String values unwrapped, anything else (null included) as compact JSON

    Raises:
        SelectorNotFoundError: If the selector matches nothing
    """
    document = _with_null_values(payload)
    result = _evaluate(document, selector)

    # Some stores nest values one level deeper than the selector expects
    if result is None and is_single_step(selector) and selector != "data" and "data" in payload:
        logger.debug(f"No match for {selector}, retrying as data.{selector}")
        result = _evaluate(document, f"data.{selector}")

    if result is None:
        raise SelectorNotFoundError(selector)

    if isinstance(result, str):
        return result
    return _to_json(result)


def build_selector(selector: str, payload: Dict[str, Any]) -> str:
    """Anchor a request selector at the payload's data object."""
    if "." not in selector:
        selector = f'"{selector}"'
    selector = f"data.{selector}"

    data = payload.get("data")
    if isinstance(data, dict) and data.get("data") is not None:
        selector = f"data.{selector}"
    return selector


def escape_key(key: str) -> str:
    """Backtick-quote keys containing '.' so they are read as one field name."""
    if "." in key:
        return f"`{key}`"
    return key
