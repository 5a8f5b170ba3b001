"""Loads secrets and their metadata from a directory of encrypted files."""
import logging
from typing import Iterable, List, Mapping, Optional, Any

from .config_loader import build_loader_config
from .errors import PrefixMismatchError, SecretReadError, UnrecognizedPathError
from .models import LoaderConfig, NAME_SEPARATOR, Secret
from .paths import canonicalize, resolve
from .reader import decrypt, read_value, sanitize

logger = logging.getLogger(__name__)


class SecretLoader:
    """Maps filesystem paths to Secret records.

    For a logical secret ``X`` the loader expects ``X<secret_suffix>``
    (required, decrypted) and optionally ``X<description_suffix>`` and
    ``X<pattern_suffix>`` (read as-is), all relative to ``root_dir`` if set.
    """

    def __init__(self, config: LoaderConfig, decrypt_timeout: Optional[float] = None):
        self.config = config
        self.decrypt_timeout = decrypt_timeout

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        file_config: Optional[Mapping[str, Any]] = None,
    ) -> "SecretLoader":
        """Build a loader from environment, overrides and config file."""
        return cls(build_loader_config(env, overrides, file_config))

    def load_all(self, paths: Iterable[str]) -> List[Secret]:
        """
        Load every secret referenced by paths.

        Paths that share a canonical identifier (``a.gpg``, ``a.pattern``,
        ``a.description``) are loaded once. Output follows the order in which
        each identifier is first seen.

        Raises:
            UnrecognizedPathError: If a path has none of the configured suffixes
            SecretLoadError: If any secret fails to load; nothing is returned
        """
        secrets: List[Secret] = []
        seen = set()

        for path in paths:
            identifier = canonicalize(path, self.config.suffixes)
            if identifier is None:
                raise UnrecognizedPathError(f"unrecognized path: {path}")

            if identifier in seen:
                logger.debug(f"Skipping {path}: {identifier} already loaded")
                continue

            seen.add(identifier)
            secrets.append(self.load(identifier))

        return secrets

    def load(self, identifier: str) -> Secret:
        """
        Load a single secret by canonical identifier.

        Raises:
            PrefixMismatchError: If identifier doesn't start with fs_prefix
            SecretReadError: If the secret file can't be decrypted or metadata can't be read
        """
        config = self.config
        if not identifier.startswith(config.fs_prefix):
            raise PrefixMismatchError(
                f"path doesn't have expected prefix {config.fs_prefix}: {identifier}"
            )

        secret_path = resolve(config.root_dir, identifier + config.secret_suffix)
        value = decrypt(config.decrypt_command, secret_path, timeout=self.decrypt_timeout)
        description = read_value(resolve(config.root_dir, identifier + config.description_suffix))
        pattern = read_value(resolve(config.root_dir, identifier + config.pattern_suffix))

        name = identifier[len(config.fs_prefix):]
        if not name.startswith(NAME_SEPARATOR):
            name = NAME_SEPARATOR + name

        try:
            secret = Secret(
                name=name,
                value=sanitize(value, config.trim),
                description=sanitize(description, config.trim),
                pattern=sanitize(pattern, config.trim),
            )
        except UnicodeDecodeError as e:
            raise SecretReadError(f"error decoding {identifier}: {e}") from e

        logger.debug(f"Loaded {secret.name} from {secret_path}")
        return secret
