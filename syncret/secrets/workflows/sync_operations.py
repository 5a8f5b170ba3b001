"""Workflow for loading secrets and syncing them to a handler."""
import logging
from typing import Iterable, List, Optional, Sequence, TextIO

from ..domains.handlers import SecretHandler
from ..domains.loader import SecretLoader
from ..domains.models import Secret

logger = logging.getLogger(__name__)


def collect_paths(args: Optional[Sequence[str]], stream: Optional[TextIO]) -> List[str]:
    """
    Get the secret paths to sync.

    Args:
        args: Paths given on the command line; used when non-empty
        stream: Fallback source with one path per line

    Returns:
        Paths in input order with line endings removed, empty lines dropped
    """
    if args:
        return list(args)

    if stream is None:
        return []

    logger.info("Reading secret paths from stdin...")
    paths = (line.rstrip("\r\n") for line in stream)
    return [path for path in paths if path]


def sync_secrets(secrets: Iterable[Secret], handler: SecretHandler) -> int:
    """
    Hand each secret to handler, in order.

    Stops at the first failure and re-raises it. Secrets handled before the
    failure stay synced.

    Returns:
        Number of secrets synced
    """
    synced = 0
    for secret in secrets:
        handler.handle(secret)
        synced += 1
        logger.info(f"Successfully synced: {secret.name}")
    return synced


def run(paths: Sequence[str], loader: SecretLoader, handler: SecretHandler) -> int:
    """
    Load all secrets, then sync them.

    Loading is all-or-nothing: if any path fails, nothing is synced.

    Returns:
        Number of secrets synced
    """
    logger.info(f"Found {len(paths)} paths")

    secrets = loader.load_all(paths)
    if not secrets:
        return 0

    return sync_secrets(secrets, handler)
