"""Shared fixtures for vault-gate tests."""
import json

import pytest

from vault_gate.secrets.domains.errors import TransportError
from vault_gate.secrets.domains.models import AuthorizationContext


class FakeVault:
    """In-memory transport recording every path it is asked for."""

    def __init__(self, bodies=None, errors=None):
        self.bodies = bodies or {}
        self.errors = errors or {}
        self.calls = []

    def get(self, path):
        self.calls.append(path)
        if path in self.errors:
            status_code, body = self.errors[path]
            raise TransportError(path, status_code, body)
        if path not in self.bodies:
            raise TransportError(path, 404, '{"errors":[]}\n')
        body = self.bodies[path]
        return body if isinstance(body, str) else json.dumps(body)


@pytest.fixture
def auth_attributes():
    """Authorization attributes matching the context fixture."""
    return {
        "x-k8s-podname": "runner-*",
        "x-k8s-namespace": "ci",
        "x-k8s-serviceaccount": "ci-runner",
        "x-github-actor": "*",
        "x-github-repo": "acme/*",
    }


@pytest.fixture
def context():
    return AuthorizationContext(
        pod_name="runner-abc12",
        pod_namespace="ci",
        pod_service_account="ci-runner",
        actor="octocat",
        repository="acme/widgets",
    )


@pytest.fixture
def fake_vault():
    return FakeVault()
