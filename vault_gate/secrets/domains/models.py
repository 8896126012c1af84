"""Domain models for secret resolution."""
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Selector markers that expand to every key of a secret
WILDCARD_UPPERCASE = "*"
WILDCARD = "**"

# Payload keys holding authorization metadata, never exported as values
RESERVED_KEY_PREFIXES = ("x-k8s-", "x-github-")


@dataclass(frozen=True)
class SecretRequest:
    """Request for one value (or, with a wildcard selector, all values) of a secret."""
    path: str
    selector: str
    output_var_name: str
    env_var_name: str
    use_key_as_name: bool = False

    @property
    def is_wildcard(self) -> bool:
        return self.selector in (WILDCARD, WILDCARD_UPPERCASE)

    @property
    def upper_case_env(self) -> bool:
        return self.selector == WILDCARD_UPPERCASE


@dataclass
class SecretResult:
    """A resolved secret value together with the request that produced it."""
    request: SecretRequest
    value: str
    cached_response: bool = False


@dataclass(frozen=True)
class AuthorizationContext:
    """Identity of the job asking for secrets."""
    pod_name: Optional[str] = None
    pod_namespace: Optional[str] = None
    pod_service_account: Optional[str] = None
    actor: Optional[str] = None
    repository: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AuthorizationContext":
        """Create context from the job environment."""
        env = os.environ if environ is None else environ
        return cls(
            pod_name=env.get("JOB_POD_NAME"),
            pod_namespace=env.get("JOB_POD_NAMESPACE"),
            pod_service_account=env.get("JOB_POD_SERVICEACCOUNT"),
            actor=env.get("GITHUB_ACTOR"),
            repository=env.get("GITHUB_REPOSITORY"),
        )


@dataclass
class SecretPayload:
    """Parsed body of a secret read."""
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def nested(self) -> bool:
        """True for the versioned shape where values live under data.data."""
        data = self.body.get("data")
        return isinstance(data, dict) and data.get("data") is not None

    @property
    def values(self) -> Dict[str, Any]:
        """Innermost data object holding value keys and authorization attributes."""
        data = self.body.get("data")
        if not isinstance(data, dict):
            return {}
        if self.nested and isinstance(data["data"], dict):
            return data["data"]
        return data
