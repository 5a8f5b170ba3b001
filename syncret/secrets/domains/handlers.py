"""Handler interface and the metadata printer."""
import sys
import json
import logging
from typing import Protocol, TextIO, Optional

from .errors import SyncError
from .models import Secret

logger = logging.getLogger(__name__)


class SecretHandler(Protocol):
    """Consumer of loaded secrets (uploader or printer)."""

    def handle(self, secret: Secret) -> None:
        """Sync one secret; raises SyncError on failure."""
        ...


class JsonPrinter:
    """Writes secret metadata (never the value) as one JSON object per line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def handle(self, secret: Secret) -> None:
        try:
            self.stream.write(json.dumps(secret.to_dict()) + "\n")
            self.stream.flush()
        except OSError as e:
            raise SyncError(f"failed printing {secret.name}: {e}") from e
