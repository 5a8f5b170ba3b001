"""Reading secret values and metadata from disk."""
import os
import logging
import subprocess
from typing import Optional

from .errors import SecretReadError

logger = logging.getLogger(__name__)


def decrypt(decrypt_command: str, path: str, timeout: Optional[float] = None) -> bytes:
    """
    Decrypt a file by running an external command on it.

    The command is invoked as ``<decrypt_command> <absolute path>``. Its stdout
    is the plaintext; its stderr goes straight to ours.

    Args:
        decrypt_command: Executable name or path
        path: File to decrypt
        timeout: Optional limit in seconds for the subprocess

    Returns:
        Decrypted bytes

    Raises:
        SecretReadError: If the file can't be opened or the command fails
    """
    abs_path = os.path.abspath(path)
    try:
        # Hold the file open while decrypting so a missing or unreadable file
        # fails here rather than inside the command
        with open(abs_path, "rb"):
            result = subprocess.run(
                [decrypt_command, abs_path],
                stdout=subprocess.PIPE,
                stderr=None,
                check=True,
                timeout=timeout,
            )
    except subprocess.CalledProcessError as e:
        raise SecretReadError(
            f"error loading {path}: {decrypt_command} exited with status {e.returncode}"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise SecretReadError(f"error loading {path}: {decrypt_command} timed out after {timeout}s") from e
    except OSError as e:
        raise SecretReadError(f"error loading {path}: {e}") from e

    logger.debug(f"Decrypted {path} with {decrypt_command}")
    return result.stdout


def read_value(path: str) -> bytes:
    """
    Read a metadata file; a missing file reads as empty.

    Raises:
        SecretReadError: On any error other than the file not existing
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        return b""
    except OSError as e:
        raise SecretReadError(f"error reading {path}: {e}") from e


def sanitize(raw: bytes, trim: bool) -> str:
    """Decode raw bytes, stripping trailing whitespace when trim is set."""
    text = raw.decode("utf-8")
    if trim:
        return text.rstrip()
    return text
