"""Write resolved secrets to pipeline outputs and environment."""
import logging
import shlex
import sys
import uuid
from typing import Dict, Iterable, Optional, TextIO

from ..domains.models import SecretResult

logger = logging.getLogger(__name__)


def mask_commands(value: str) -> Iterable[str]:
    """Workflow commands masking every line of a value in job logs."""
    for line in value.replace("\r", "").split("\n"):
        if line.strip():
            yield f"::add-mask::{line}"


def _append_record(file_path: str, name: str, value: str) -> None:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def export_results(
    results: Iterable[SecretResult],
    export_env: bool = True,
    github_env: Optional[str] = None,
    github_output: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> Dict[str, str]:
    """
    Export resolved secrets.

    Args:
        results: Resolved secrets
        export_env: Also export values as environment variables
        github_env: File collecting environment exports (GITHUB_ENV)
        github_output: File collecting step outputs (GITHUB_OUTPUT)
        stream: Where mask commands and shell exports are printed

    Returns:
        Mapping of output names to values
    """
    stream = stream or sys.stdout
    outputs = {}

    for result in results:
        request = result.request
        for command in mask_commands(result.value):
            print(command, file=stream)

        if export_env:
            if github_env:
                _append_record(github_env, request.env_var_name, result.value)
            else:
                print(f"export {request.env_var_name}={shlex.quote(result.value)}", file=stream)

        if github_output:
            _append_record(github_output, request.output_var_name, result.value)
        outputs[request.output_var_name] = result.value
        message = f"✔ {request.path} => outputs.{request.output_var_name}"
        if export_env:
            message += f" | env.{request.env_var_name}"
        logger.info(message)

    return outputs
