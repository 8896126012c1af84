"""CLI entrypoint for vault-gate."""
import sys
import argparse
import logging
import os

from .validators import read_secrets_input, validate_secret_requests

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr
    )


def cmd_version(args):
    """Show version information."""
    print(f"vault-gate {VERSION}")


def cmd_secrets_get(args):
    """Resolve secrets from Vault and export them."""
    from vault_gate.secrets.domains.config_loader import load_config
    from vault_gate.secrets.domains.models import AuthorizationContext
    from vault_gate.secrets.domains.vault_client import VaultClient
    from vault_gate.secrets.workflows.exporters import export_results
    from vault_gate.secrets.workflows.secret_operations import get_secrets

    secrets_input = read_secrets_input(args.secrets, args.secrets_file)
    requests = validate_secret_requests(secrets_input)

    config = load_config(args.config)
    ignore_not_found = args.ignore_not_found or config.ignore_not_found
    export_env = config.export_env and not args.no_export_env

    client = VaultClient.from_config(config)
    try:
        results = get_secrets(
            requests,
            client,
            AuthorizationContext.from_env(),
            ignore_not_found=ignore_not_found,
        )
    finally:
        client.close()

    export_results(
        results,
        export_env=export_env,
        github_env=os.getenv("GITHUB_ENV"),
        github_output=os.getenv("GITHUB_OUTPUT"),
    )
    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vault-gate",
        description="Resolve Vault secrets for a CI job, authorized by the job's own identity",
        epilog="""
Exit codes:
  0 - Success (including a batch withheld by authorization)
  1 - Runtime error (configuration, network, secret or selector not found)
  2 - Usage error (invalid arguments, malformed secrets input)

Environment variables:
  VAULT_ADDR, VAULT_TOKEN, VAULT_NAMESPACE - Vault connection (override config file)
  VAULT_GATE_CONFIG - Path to config file
  JOB_POD_NAME, JOB_POD_NAMESPACE, JOB_POD_SERVICEACCOUNT,
  GITHUB_ACTOR, GITHUB_REPOSITORY - Identity checked against each secret
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of vault-gate"
    )

    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Secret operations",
        description="Read secrets from Vault"
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")

    get_parser = secrets_subparsers.add_parser(
        "get",
        help="Resolve and export secrets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Resolve a batch of secrets and export them as step outputs and environment
variables.

Every secret must carry x-k8s-podname, x-k8s-namespace, x-k8s-serviceaccount,
x-github-actor and x-github-repo glob patterns matching the job identity.
If any secret in the batch is not authorized, nothing is exported.

Use '*' as key to export all keys with upper-cased environment names, or
'**' to keep their case.
        """
    )
    get_parser.add_argument(
        "--secrets",
        help="Secrets to read: '<path> <key> [| <name>]' separated by ';' or newlines"
    )
    get_parser.add_argument(
        "--secrets-file",
        help="File containing the secrets input"
    )
    get_parser.add_argument(
        "--config",
        help="Path to config file (default: ~/.config/vault-gate/config.yml)"
    )
    get_parser.add_argument(
        "--ignore-not-found",
        action="store_true",
        help="Skip secrets whose path does not exist instead of failing"
    )
    get_parser.add_argument(
        "--no-export-env",
        action="store_true",
        help="Only write step outputs, do not export environment variables"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log authorization checks and requests to stderr"
    )
    # SUPPRESS keeps the subcommand from resetting a top-level -v
    get_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log authorization checks and requests to stderr"
    )

    parser.set_defaults(secrets_parser=secrets_parser)
    return parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (configuration, network, secret not found, etc.)
        2 - Usage errors (invalid arguments, malformed secrets input, etc.)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "secrets":
            if args.secrets_command == "get":
                cmd_secrets_get(args)
            else:
                args.secrets_parser.print_help()
                sys.exit(2)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
