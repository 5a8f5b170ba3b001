"""Exception hierarchy for syncret."""


class SyncretError(Exception):
    """Base class for all syncret errors."""


class ConfigError(SyncretError):
    """Configuration error exception."""


class SecretLoadError(SyncretError):
    """Raised when a secret cannot be loaded from the filesystem."""


class UnrecognizedPathError(SecretLoadError):
    """Raised when a path ends with none of the configured suffixes."""


class PrefixMismatchError(SecretLoadError):
    """Raised when a canonical identifier lacks the configured fs prefix."""


class SecretReadError(SecretLoadError):
    """Raised when a secret or metadata file cannot be read or decrypted."""


class InvalidSecretNameError(SyncretError):
    """Raised when a secret name is not an absolute, non-empty path."""


class SyncError(SyncretError):
    """Raised when a handler fails to sync a secret."""
