"""CLI entrypoint for syncret."""
import os
import sys
import argparse
import logging

from syncret.secrets.domains.errors import SyncretError

from .validators import validate_suffix, validate_store_options

VERSION = "0.1.0"

# Configure logging to stderr; stdout is reserved for printed metadata
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="syncret",
        usage="%(prog)s [options] [FILE ...]",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Synchronizes a directory of encrypted secrets and metadata with a remote
parameter store.

By default, just prints metadata to stdout; provide --commit to upload.

If files are provided as arguments, they will be used; otherwise, paths
will be read from stdin.
        """,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (unreadable secret, decrypt failure, upload failure, etc.)
  2 - Usage error (invalid arguments)

Environment variables:
  SYNCRET_DECRYPT             - Decrypt command (default: cat)
  SYNCRET_SUFFIX              - Secret file suffix (default: .gpg)
  SYNCRET_DESCRIPTION_SUFFIX  - Description file suffix (default: .description)
  SYNCRET_PATTERN_SUFFIX      - Pattern file suffix (default: .pattern)
  SYNCRET_PREFIX              - Filesystem-only prefix
  SYNCRET_ROOT                - Root directory
  SYNCRET_TRIM                - Trim trailing whitespace (default: true)
  SYNCRET_CONFIG              - YAML config file

Configuration:
  Default location: ~/.config/syncret/config.yml (optional)
        """
    )

    parser.add_argument("paths", nargs="*", metavar="FILE", help="Secret, description or pattern files")
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Sync changes to the parameter store rather than just printing metadata"
    )
    parser.add_argument(
        "--store",
        choices=["ssm", "gcp"],
        default="ssm",
        help="Remote store used with --commit (default: ssm)"
    )
    parser.add_argument("--prefix", help="A prefix present in the FS but not in the parameter store")
    parser.add_argument("--root", help="Directory relative to which paths are interpreted")
    parser.add_argument(
        "--trim",
        dest="trim",
        action="store_true",
        default=None,
        help="Trim trailing whitespace from input data (default)"
    )
    parser.add_argument("--no-trim", dest="trim", action="store_false", help="Keep input data as-is")
    parser.add_argument("--decrypt", help="Command used to decrypt secret files")
    parser.add_argument("--suffix", help="Secret file suffix")
    parser.add_argument("--description-suffix", help="Description file suffix")
    parser.add_argument("--pattern-suffix", help="Pattern file suffix")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--region", help="AWS region for --store ssm")
    parser.add_argument("--project-id", help="GCP project ID for --store gcp")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    parser.add_argument("--version", action="version", version=f"syncret {VERSION}")
    return parser


def _configure_logging(args) -> None:
    if args.quiet:
        level = logging.WARNING
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.getLogger().setLevel(level)


def build_handler(args, file_config):
    """Pick the handler: a remote committer with --commit, otherwise the printer."""
    from syncret.secrets.domains.handlers import JsonPrinter

    if not args.commit:
        return JsonPrinter(sys.stdout)

    if args.store == "gcp":
        from syncret.secrets.domains.gcp_client import GCPSecretCommitter

        return GCPSecretCommitter(project_id=args.project_id, gcp_config=file_config.get("gcp") or {})

    from syncret.secrets.domains.ssm_client import SSMCommitter, STANDARD_TIER_MAX_BYTES

    aws_config = file_config.get("aws") or {}
    return SSMCommitter(
        region_name=args.region or aws_config.get("region"),
        standard_tier_max_bytes=int(aws_config.get("standard_tier_max_bytes", STANDARD_TIER_MAX_BYTES)),
    )


def cmd_sync(args) -> int:
    """Load secrets from disk and sync them."""
    from syncret.secrets.domains.config_loader import load_config_file
    from syncret.secrets.domains.loader import SecretLoader
    from syncret.secrets.workflows.sync_operations import collect_paths, run

    file_config = load_config_file(args.config, os.environ)
    loader = SecretLoader.from_env(
        env=os.environ,
        overrides={
            "decrypt_command": args.decrypt,
            "secret_suffix": args.suffix,
            "description_suffix": args.description_suffix,
            "pattern_suffix": args.pattern_suffix,
            "fs_prefix": args.prefix,
            "root_dir": args.root,
            "trim": args.trim,
        },
        file_config=file_config,
    )
    handler = build_handler(args, file_config)

    paths = collect_paths(args.paths, sys.stdin)
    return run(paths, loader, handler)


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (unreadable secret, decrypt failure, upload failure, etc.)
        2 - Usage errors (invalid arguments)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args)

    for flag, suffix in (
        ("--suffix", args.suffix),
        ("--description-suffix", args.description_suffix),
        ("--pattern-suffix", args.pattern_suffix),
    ):
        if suffix is not None:
            validate_suffix(flag, suffix)
    validate_store_options(args.store, args.commit, args.region, args.project_id)

    try:
        cmd_sync(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except SyncretError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
