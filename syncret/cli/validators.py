"""Input validation for CLI arguments."""
import sys
import logging

logger = logging.getLogger(__name__)


def validate_suffix(flag: str, suffix: str) -> None:
    """
    Validate a suffix override is usable.

    A suffix must contain something besides dots, e.g. ``.gpg`` or ``gpg``.

    Args:
        flag: Flag name, for the error message
        suffix: Suffix to validate

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not suffix.lstrip("."):
        print(f"Error: {flag} cannot be empty", file=sys.stderr)
        print("\nExamples of valid suffixes: .gpg, .asc, description", file=sys.stderr)
        sys.exit(2)


def validate_store_options(store: str, commit: bool, region: str = None, project_id: str = None) -> None:
    """
    Validate remote store flags are consistent.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if region and store != "ssm":
        print("Error: --region only applies to --store ssm", file=sys.stderr)
        sys.exit(2)

    if project_id and store != "gcp":
        print("Error: --project-id only applies to --store gcp", file=sys.stderr)
        sys.exit(2)

    if (region or project_id) and not commit:
        logger.warning("Warning: remote store options are ignored without --commit")
