"""Configuration loader for vault-gate."""
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "vault-gate" / "config.yml"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


class ConfigError(Exception):
    """Configuration error exception."""
    pass


@dataclass
class VaultGateConfig:
    """Settings for one secret resolution run."""
    url: str
    token: Optional[str] = None
    namespace: Optional[str] = None
    verify_tls: bool = True
    ca_cert: Optional[str] = None
    timeout: float = 30
    headers: Dict[str, str] = field(default_factory=dict)
    ignore_not_found: bool = False
    export_env: bool = True


def _get_config_path(config_path: Optional[str] = None) -> Optional[Path]:
    """
    Get config file path.

    Priority order:
    1. Explicit path argument
    2. VAULT_GATE_CONFIG environment variable
    3. Default location: ~/.config/vault-gate/config.yml

    Returns:
        Path to the config file, or None when no file is configured and the
        default location does not exist

    Raises:
        ConfigError: If an explicitly requested file doesn't exist
    """
    explicit = config_path or os.getenv("VAULT_GATE_CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigError(f"Configuration file not found at: {path}")
        logger.info(f"Using config from: {path}")
        return path

    if DEFAULT_CONFIG_PATH.is_file():
        logger.info(f"Using default config location: {DEFAULT_CONFIG_PATH}")
        return DEFAULT_CONFIG_PATH

    logger.debug("No config file found, using environment only")
    return None


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ConfigError(f"'{name}' must be a boolean, got: {value!r}")


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {path}: {e}")

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {path} must contain a mapping")
    return config


def load_config(config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> VaultGateConfig:
    """
    Load and validate configuration from YAML file and environment.

    Environment variables (VAULT_ADDR, VAULT_TOKEN, VAULT_NAMESPACE,
    VAULT_SKIP_VERIFY, VAULT_CACERT, VAULT_GATE_IGNORE_NOT_FOUND) override
    values from the file.

    Raises:
        ConfigError: If the file is invalid or required settings are missing
    """
    env = os.environ if environ is None else environ
    path = _get_config_path(config_path)
    config = _read_yaml(path) if path else {}

    vault = config.get("vault") or {}
    if not isinstance(vault, dict):
        raise ConfigError("'vault' section must be a mapping")

    url = env.get("VAULT_ADDR") or vault.get("url")
    if not url:
        raise ConfigError(
            "Vault address not configured. Set VAULT_ADDR or add to your config:\n"
            "vault:\n"
            "  url: https://vault.example.com"
        )

    token = env.get(vault.get("token_env", "VAULT_TOKEN")) or vault.get("token")
    namespace = env.get("VAULT_NAMESPACE") or vault.get("namespace")

    verify_tls = _parse_bool("vault.verify_tls", vault.get("verify_tls", True))
    if "VAULT_SKIP_VERIFY" in env:
        verify_tls = not _parse_bool("VAULT_SKIP_VERIFY", env["VAULT_SKIP_VERIFY"])
    ca_cert = env.get("VAULT_CACERT") or vault.get("ca_cert")

    timeout = vault.get("timeout", 30)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError(f"'vault.timeout' must be a positive number, got: {timeout!r}")

    headers = vault.get("headers") or {}
    if not isinstance(headers, dict):
        raise ConfigError("'vault.headers' must be a mapping")

    ignore_not_found = _parse_bool("ignore_not_found", config.get("ignore_not_found", False))
    if "VAULT_GATE_IGNORE_NOT_FOUND" in env:
        ignore_not_found = _parse_bool("VAULT_GATE_IGNORE_NOT_FOUND", env["VAULT_GATE_IGNORE_NOT_FOUND"])

    export_env = _parse_bool("export_env", config.get("export_env", True))

    logger.debug(f"Using Vault at: {url}")
    return VaultGateConfig(
        url=url,
        token=token,
        namespace=namespace,
        verify_tls=verify_tls,
        ca_cert=ca_cert,
        timeout=timeout,
        headers={str(k): str(v) for k, v in headers.items()},
        ignore_not_found=ignore_not_found,
        export_env=export_env,
    )
