"""Domain models for secret synchronization."""
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .errors import InvalidSecretNameError

NAME_SEPARATOR = "/"


@dataclass(frozen=True)
class Secret:
    """A secret loaded from disk, ready to be synced.

    The value is kept out of ``repr`` and out of ``to_dict`` unless it is
    explicitly requested, so printing a record never leaks the payload.
    """
    name: str
    value: str = field(repr=False)
    description: str = ""
    pattern: str = ""

    def __post_init__(self):
        if not self.name or not self.name.startswith(NAME_SEPARATOR) or self.name == NAME_SEPARATOR:
            raise InvalidSecretNameError(
                f"Secret name must be an absolute path with at least one component: {self.name!r}"
            )

    def to_dict(self, include_value: bool = False) -> Dict[str, Any]:
        """
        Serializable view of the secret.

        Args:
            include_value: Include the decrypted value (off by default)

        Returns:
            Dict with ``name`` and, when non-empty, ``description`` and ``pattern``
        """
        data: Dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.pattern:
            data["pattern"] = self.pattern
        if include_value:
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class LoaderConfig:
    """Resolved loader settings, built once per process."""
    secret_suffix: str = ".gpg"
    description_suffix: str = ".description"
    pattern_suffix: str = ".pattern"
    decrypt_command: str = "cat"
    fs_prefix: str = ""
    root_dir: str = ""
    trim: bool = True

    @property
    def suffixes(self) -> Tuple[str, str, str]:
        """All role suffixes, in the order they are tried."""
        return (self.secret_suffix, self.pattern_suffix, self.description_suffix)
