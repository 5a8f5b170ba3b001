"""GCP Secret Manager handler."""
import os
import re
import logging
import subprocess
from typing import Any, Dict, Mapping, Optional

from google.api_core import exceptions as gcp_exceptions
from google.cloud import secretmanager
from google.protobuf import field_mask_pb2

from .errors import ConfigError, SyncError
from .models import Secret, NAME_SEPARATOR

logger = logging.getLogger(__name__)

# GCP secret IDs allow only: [a-zA-Z0-9_-]
SECRET_ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')


def to_secret_id(name: str) -> str:
    """
    Map an absolute secret name to a GCP secret ID.

    /secrets/db -> secrets_db

    Raises:
        SyncError: If the name has an empty path segment or the result
            contains characters GCP doesn't allow
    """
    segments = name[len(NAME_SEPARATOR):].split(NAME_SEPARATOR)
    if not all(segments):
        raise SyncError(f"cannot map {name} to a GCP secret ID: empty path segment")
    secret_id = "_".join(segments)
    if not SECRET_ID_PATTERN.match(secret_id):
        raise SyncError(
            f"cannot map {name} to a GCP secret ID: only letters, numbers, "
            f"underscores (_), hyphens (-) and '/' separators are allowed"
        )
    return secret_id


def make_annotations(secret: Secret) -> Dict[str, str]:
    """Metadata stored alongside the GCP secret."""
    annotations = {}
    if secret.description:
        annotations["description"] = secret.description
    if secret.pattern:
        annotations["pattern"] = secret.pattern
    return annotations


def apply_credentials(gcp_config: Mapping[str, Any]) -> None:
    """Set GOOGLE_APPLICATION_CREDENTIALS from the gcp config section, if given."""
    service_account_path = gcp_config.get("service_account_path")
    if not service_account_path:
        return

    if not os.path.isfile(service_account_path):
        raise ConfigError(f"Service account file not found at: {service_account_path}")

    os.environ['GOOGLE_APPLICATION_CREDENTIALS'] = service_account_path
    logger.info(f"Set GOOGLE_APPLICATION_CREDENTIALS from config: {service_account_path}")


class GCPSecretCommitter:
    """Uploads secrets to GCP Secret Manager."""

    def __init__(self, client: Any = None, project_id: Optional[str] = None,
                 gcp_config: Optional[Mapping[str, Any]] = None):
        self._client = client
        self._project_id = project_id
        self.gcp_config = gcp_config or {}
        # secret ID -> name that produced it, for this run
        self._names_by_id: Dict[str, str] = {}

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy-initialize client."""
        if self._client is None:
            apply_credentials(self.gcp_config)
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    @property
    def project_id(self) -> str:
        if self._project_id is None:
            self._project_id = self.get_project_id()
        return self._project_id

    def get_project_id(self) -> str:
        """
        Resolve the GCP project ID.

        Priority order:
        1. GCP_PROJECT environment variable
        2. gcp.project_id in the config file
        3. gcloud config get-value project

        Raises:
            ConfigError: If no project ID can be found
        """
        gcp_project_env = os.getenv("GCP_PROJECT")
        if gcp_project_env:
            logger.debug(f"Using GCP_PROJECT from environment: {gcp_project_env}")
            return gcp_project_env

        project_id = self.gcp_config.get("project_id")
        if project_id:
            logger.debug(f"Using project_id from config: {project_id}")
            return str(project_id)

        try:
            result = subprocess.run(
                ["gcloud", "config", "get-value", "project"],
                capture_output=True, text=True, check=True
            )
            project_id = result.stdout.strip()
            if project_id:
                logger.debug(f"Using project from gcloud config: {project_id}")
                return project_id
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"Failed to auto-detect project_id: {e}")

        raise ConfigError(
            "Project ID not found. Please set GCP_PROJECT, pass --project-id, "
            "or configure gcp.project_id in the config file"
        )

    def _ensure_secret(self, secret_id: str, secret: Secret) -> str:
        parent = f"projects/{self.project_id}"
        secret_path = f"{parent}/secrets/{secret_id}"
        annotations = make_annotations(secret)
        try:
            self.client.create_secret(
                request={
                    "parent": parent,
                    "secret_id": secret_id,
                    "secret": {
                        "replication": {"automatic": {}},
                        "annotations": annotations,
                    },
                }
            )
            logger.debug(f"Created GCP secret {secret_path}")
        except gcp_exceptions.AlreadyExists:
            # Overwrite metadata so it always matches the files on disk
            self.client.update_secret(
                request={
                    "secret": {"name": secret_path, "annotations": annotations},
                    "update_mask": field_mask_pb2.FieldMask(paths=["annotations"]),
                }
            )
        return secret_path

    def handle(self, secret: Secret) -> None:
        secret_id = to_secret_id(secret.name)
        previous = self._names_by_id.setdefault(secret_id, secret.name)
        if previous != secret.name:
            raise SyncError(
                f"cannot upload {secret.name}: GCP secret ID {secret_id} is already used by {previous}"
            )
        try:
            secret_path = self._ensure_secret(secret_id, secret)
            self.client.add_secret_version(
                request={
                    "parent": secret_path,
                    "payload": {"data": secret.value.encode("UTF-8")},
                }
            )
        except gcp_exceptions.GoogleAPICallError as e:
            raise SyncError(f"failed uploading {secret.name}: {e}") from e
        logger.debug(f"Uploaded {secret.name} to GCP as {secret_id}")
