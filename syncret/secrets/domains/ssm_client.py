"""AWS SSM Parameter Store handler."""
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SyncError
from .models import Secret

logger = logging.getLogger(__name__)

PARAMETER_TYPE = "SecureString"
STANDARD_TIER = "Standard"
ADVANCED_TIER = "Advanced"

# Maximum value size of a standard-tier parameter (4 KB) as published by AWS.
# Larger values need the advanced tier.
STANDARD_TIER_MAX_BYTES = 4096


def select_tier(value: str, standard_tier_max_bytes: int = STANDARD_TIER_MAX_BYTES) -> str:
    """Pick the parameter tier from the UTF-8 size of value."""
    if len(value.encode("utf-8")) <= standard_tier_max_bytes:
        return STANDARD_TIER
    return ADVANCED_TIER


def make_put_parameter_request(
    secret: Secret, standard_tier_max_bytes: int = STANDARD_TIER_MAX_BYTES
) -> Dict[str, Any]:
    """Build put_parameter kwargs: always overwrite, always SecureString."""
    return {
        "Name": secret.name,
        "Value": secret.value,
        "Description": secret.description,
        "AllowedPattern": secret.pattern,
        "Type": PARAMETER_TYPE,
        "Overwrite": True,
        "Tier": select_tier(secret.value, standard_tier_max_bytes),
    }


class SSMCommitter:
    """Uploads secrets to SSM Parameter Store."""

    def __init__(
        self,
        client: Any = None,
        region_name: Optional[str] = None,
        standard_tier_max_bytes: int = STANDARD_TIER_MAX_BYTES,
    ):
        self._client = client
        self.region_name = region_name
        self.standard_tier_max_bytes = standard_tier_max_bytes

    @property
    def client(self) -> Any:
        """Lazy-initialize client."""
        if self._client is None:
            self._client = boto3.client("ssm", region_name=self.region_name)
        return self._client

    def handle(self, secret: Secret) -> None:
        request = make_put_parameter_request(secret, self.standard_tier_max_bytes)
        try:
            self.client.put_parameter(**request)
        except (ClientError, BotoCoreError) as e:
            raise SyncError(f"failed uploading {secret.name}: {e}") from e
        logger.debug(f"Uploaded {secret.name} to SSM ({request['Tier']} tier)")
