"""Authorization gate evaluated against each secret's own access attributes.

Every secret carries glob patterns describing who may read it:

    x-k8s-podname         matched against the job pod name
    x-k8s-namespace       matched against the job pod namespace
    x-k8s-serviceaccount  matched against the job pod service account
    x-github-actor        matched against the GitHub actor
    x-github-repo         matched against the GitHub repository

All five attributes are required. Checks run in that order and stop at the
first failure.
"""
import logging
from typing import Any, Dict, Optional

from wcmatch import glob

from .models import AuthorizationContext

logger = logging.getLogger(__name__)

# "*" and "?" stop at "/", "**" crosses it, {a,b} expands
GLOB_FLAGS = glob.CASE | glob.BRACE | glob.GLOBSTAR | glob.EXTGLOB

# (payload attribute, context field, environment variable reported in traces)
AUTHORIZATION_CHECKS = (
    ("x-k8s-podname", "pod_name", "JOB_POD_NAME"),
    ("x-k8s-namespace", "pod_namespace", "JOB_POD_NAMESPACE"),
    ("x-k8s-serviceaccount", "pod_service_account", "JOB_POD_SERVICEACCOUNT"),
    ("x-github-actor", "actor", "GITHUB_ACTOR"),
    ("x-github-repo", "repository", "GITHUB_REPOSITORY"),
)


def _matches(subject: Optional[str], pattern: Any) -> bool:
    if subject is None or not isinstance(pattern, str):
        return False
    return glob.globmatch(subject, pattern, flags=GLOB_FLAGS)


def is_allowed(data: Dict[str, Any], context: AuthorizationContext) -> bool:
    """
    Check whether the caller identity may read a secret.

    Args:
        data: Innermost data object of the secret payload
        context: Identity of the calling job

    Returns:
        True if every authorization attribute matches, False otherwise
    """
    for attribute, field_name, env_name in AUTHORIZATION_CHECKS:
        logger.debug(f"check {attribute}")
        if attribute not in data:
            logger.debug(f"missing {attribute}; auth denied")
            return False

        pattern = data[attribute]
        logger.debug(f"{attribute}={pattern}")
        subject = getattr(context, field_name)
        if not _matches(subject, pattern):
            logger.debug(f"{env_name}={subject}; auth denied")
            return False
        logger.debug(f"matched {attribute}")

    logger.debug("secret authorized")
    return True
