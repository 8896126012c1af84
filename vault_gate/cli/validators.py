"""Input validation for CLI arguments."""
import sys
from pathlib import Path
from typing import List, Optional

from vault_gate.secrets.domains.errors import SecretRequestError
from vault_gate.secrets.domains.models import SecretRequest
from vault_gate.secrets.workflows.request_parser import parse_secrets_input


def read_secrets_input(secrets: Optional[str], secrets_file: Optional[str]) -> str:
    """
    Return the secrets input from --secrets or --secrets-file.

    Raises:
        SystemExit with code 2 if neither or both are given, or the file is unreadable
    """
    if bool(secrets) == bool(secrets_file):
        print("Error: Provide exactly one of --secrets or --secrets-file", file=sys.stderr)
        sys.exit(2)

    if secrets_file:
        path = Path(secrets_file)
        if not path.is_file():
            print(f"Error: Secrets file does not exist: {path}", file=sys.stderr)
            sys.exit(2)
        return path.read_text()
    return secrets


def validate_secret_requests(secrets_input: str) -> List[SecretRequest]:
    """
    Parse secrets input, exiting on malformed entries.

    Raises:
        SystemExit with code 2 if parsing fails or nothing was requested
    """
    try:
        requests = parse_secrets_input(secrets_input)
    except SecretRequestError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("\nExpected format: <path> <key> [| <name>], separated by ';' or newlines", file=sys.stderr)
        print("\nExamples:", file=sys.stderr)
        print("  ✓ secret/data/ci npm_token | NPM_TOKEN", file=sys.stderr)
        print("  ✓ secret/data/ci/aws * | AWS_", file=sys.stderr)
        sys.exit(2)

    if not requests:
        print("Error: No secrets requested", file=sys.stderr)
        sys.exit(2)
    return requests
