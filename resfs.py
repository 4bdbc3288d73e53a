"""CLI entry point for resfs — layered read-only resource filesystem."""

import argparse
import contextlib
import logging
import os
import shutil
import sys

from filesystem import FileSystem
from paths import normalize_path
from provider import NotFoundError, ProviderError
from provider_dir import DirProvider
from provider_ini import IniProvider, read_properties
from provider_zip import ZipProvider
from resource_config import ResourceConfig

log = logging.getLogger(__name__)

_CONFIGURED_ATTR = "_resfs_logging_configured"
_DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr. Only the first call installs a handler."""
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_ATTR, False):
        root.setLevel(level)
        return

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(_DEFAULT_LOG_FORMAT))
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(True)
    setattr(root, _CONFIGURED_ATTR, True)


def build_filesystem(config: ResourceConfig,
                     stack: contextlib.ExitStack | None = None) -> FileSystem:
    """Register the providers described by config, highest priority first.

    Archives opened here are closed when stack is closed.
    """
    fs = FileSystem()
    for root in config.resource_dirs:
        for name in config.documents:
            fs.register_provider(IniProvider(os.path.join(root, name), name))
        if config.data_dir is not None:
            fs.register_provider(DirProvider(os.path.join(root, config.data_dir)))
        for name in config.archives:
            path = os.path.join(root, name)
            try:
                provider = ZipProvider(path)
            except NotFoundError:
                if not config.skip_missing_archives:
                    raise
                log.warning("Archive %s not found, skipping", path)
                continue
            if stack is not None:
                stack.callback(provider.close)
            fs.register_provider(provider)
    return fs


def load_config(args: argparse.Namespace) -> ResourceConfig:
    """Build the resource configuration from an optional file plus command-line options."""
    config = ResourceConfig.from_file(args.config) if args.config else ResourceConfig()
    updates = {}
    if args.resource_dirs:
        # Directories given on the command line take priority over the config file.
        updates["resource_dirs"] = args.resource_dirs + config.resource_dirs
    if args.data_dir is not None:
        updates["data_dir"] = args.data_dir or None
    if args.archives:
        updates["archives"] = config.archives + args.archives
    if args.documents:
        updates["documents"] = config.documents + args.documents
    return config.model_copy(update=updates)


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="resfs — layered read-only resource filesystem"
    )
    parser.add_argument("-c", "--config", help="YAML or JSON resource configuration")
    parser.add_argument("-r", "--resource-dir", dest="resource_dirs", action="append",
                        default=[], help="Resource directory (repeatable, first has priority)")
    parser.add_argument("--data-dir", help="Loose-file directory inside each resource dir "
                        "(empty string disables)")
    parser.add_argument("-a", "--archive", dest="archives", action="append", default=[],
                        help="ZIP archive name inside each resource dir (repeatable)")
    parser.add_argument("-d", "--document", dest="documents", action="append", default=[],
                        help="Configuration document inside each resource dir (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("cat", help="Write a resource to stdout")
    p.add_argument("path")
    p = sub.add_parser("stat", help="Print the size of a resource")
    p.add_argument("path")
    p = sub.add_parser("exists", help="Exit 0 if a resource resolves, 1 otherwise")
    p.add_argument("path")
    p = sub.add_parser("normalize", help="Print the canonical form of a path")
    p.add_argument("path")
    p = sub.add_parser("get", help="Print one value from a configuration document")
    p.add_argument("section")
    p.add_argument("key")
    p.add_argument("path")

    return parser


def main(argv: list[str] | None = None):
    parser = make_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "normalize":
        print(normalize_path(args.path))
        return

    try:
        with contextlib.ExitStack() as stack:
            fs = build_filesystem(load_config(args), stack)
            _run_command(args, fs)
    except ProviderError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _run_command(args: argparse.Namespace, fs: FileSystem) -> None:
    if args.command == "exists":
        sys.exit(0 if fs.exists(args.path) else 1)
    elif args.command == "stat":
        print(f"{args.path}: {fs.metadata(args.path).length} bytes")
    elif args.command == "cat":
        with fs.reader(args.path) as f:
            shutil.copyfileobj(f, sys.stdout.buffer)
        sys.stdout.flush()
    elif args.command == "get":
        props = read_properties(fs, args.path)
        if not props.has_option(args.section, args.key):
            raise NotFoundError(f"No {args.section}.{args.key} in {args.path}")
        print(props.get(args.section, args.key).strip())


if __name__ == "__main__":
    main()
