"""Command line interface for iterspace.

This module provides commands for:
- Snapshotting a working directory and spawning alternate branches
- Inspecting history and switching or promoting branches
- Packing, unpacking and pushing archives of the working directory
"""

import argparse
import getpass
import logging
import os
import sys
from pathlib import Path

from iterspace.core.config import Config
from iterspace.core.exceptions import IterspaceError
from iterspace.core.types import ANONYMOUS_IDENTITY
from iterspace.packaging.archive import build_archive, extract_archive
from iterspace.remote.push import put_stream, put_stream_encrypted
from iterspace.workspace.versioned import VersionedWorkspace

IDENTITY_ENV_KEY = "ITERSPACE_IDENTITY"
DEFAULT_KEY_ENV = "ITERSPACE_KEY"


def default_identity() -> str:
    """Get the identity used when none is given on the command line."""
    identity = os.environ.get(IDENTITY_ENV_KEY)
    if identity:
        return identity
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ANONYMOUS_IDENTITY


def load_config(args: argparse.Namespace) -> Config:
    """Load iterspace.json of the selected working directory."""
    return Config.for_workdir(Path(args.dir))


def open_workspace(args: argparse.Namespace) -> VersionedWorkspace:
    """Open the versioned workspace selected by global options."""
    vcr_config = load_config(args).to_vcr_config()
    return VersionedWorkspace(args.identity, Path(args.dir), vcr_config)


def _report(result_ok: bool, value: str) -> int:
    if result_ok:
        print(value)
        return 0
    print(f"Operation failed{': ' + value if value else ''}", file=sys.stderr)
    return 1


def cmd_init(args: argparse.Namespace) -> int:
    """Init command handler."""
    ws = open_workspace(args)
    print(f"{ws.workdir}: {ws.state.value} (branch {ws.current_branch or '-'})")
    return 0


def cmd_commit(args: argparse.Namespace) -> int:
    """Commit command handler."""
    result = open_workspace(args).commit(args.message)
    return _report(result.ok, result.sentinel if result.ok else result.reason or "")


def cmd_branch(args: argparse.Namespace) -> int:
    """Branch command handler."""
    ws = open_workspace(args)
    result = ws.branch_from(args.base, args.comment)
    if not result.ok:
        return _report(False, result.reason or "")
    return _report(True, f"{ws.current_branch} {result.sentinel}")


def cmd_history(args: argparse.Namespace) -> int:
    """History command handler."""
    for entry in open_workspace(args).get_history():
        print(entry)
    return 0


def cmd_checkout(args: argparse.Namespace) -> int:
    """Checkout command handler."""
    open_workspace(args).checkout(args.branch)
    return 0


def cmd_promote(args: argparse.Namespace) -> int:
    """Promote command handler."""
    revision = open_workspace(args).rewrite_to_main(args.source, args.message)
    return _report(True, revision)


def cmd_purge(args: argparse.Namespace) -> int:
    """Purge command handler."""
    open_workspace(args).purge()
    print(f"Purged version history of {Path(args.dir).resolve()}")
    return 0


def cmd_pack(args: argparse.Namespace) -> int:
    """Pack command handler."""
    ignore_file = load_config(args).to_vcr_config().ignore_file
    data = build_archive(args.dir, args.path, ignore_file)
    Path(args.output).write_bytes(data)
    print(f"Wrote {len(data)} bytes to {args.output}")
    return 0


def cmd_unpack(args: argparse.Namespace) -> int:
    """Unpack command handler."""
    extracted = extract_archive(Path(args.archive), args.destination)
    print(f"Extracted {len(extracted)} file(s) to {args.destination}")
    return 0


def cmd_push(args: argparse.Namespace) -> int:
    """Push command handler."""
    config = load_config(args)
    data = build_archive(args.dir, args.path, config.to_vcr_config().ignore_file)
    remote_url = args.url or config.to_storage_config().remote_url
    if not remote_url:
        print("No remote URL given", file=sys.stderr)
        return 1

    key_hex = os.environ.get(args.key_env)
    if key_hex:
        put_stream_encrypted(remote_url, args.rel, data, bytes.fromhex(key_hex))
    else:
        put_stream(remote_url, args.rel, data)
    print("Push OK")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="iterspace",
        description="Branch-per-iteration versioning of a working directory",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--dir",
        "-C",
        default=".",
        help="Working directory (default: current directory)",
    )
    parser.add_argument(
        "--identity",
        default=default_identity(),
        help=f"User identity; '{ANONYMOUS_IDENTITY}' disables versioning",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init", help="Open or create the version store")
    init_parser.set_defaults(func=cmd_init)

    commit_parser = subparsers.add_parser("commit", help="Snapshot all changes")
    commit_parser.add_argument("--message", "-m", required=True, help="Commit message")
    commit_parser.set_defaults(func=cmd_commit)

    branch_parser = subparsers.add_parser("branch", help="Start an alternate branch")
    branch_parser.add_argument("base", help="Reference the iteration is based on")
    branch_parser.add_argument("comment", help="Description of the iteration")
    branch_parser.set_defaults(func=cmd_branch)

    history_parser = subparsers.add_parser(
        "history", aliases=["log"], help="Show history of the current branch"
    )
    history_parser.set_defaults(func=cmd_history)

    checkout_parser = subparsers.add_parser("checkout", help="Switch branch")
    checkout_parser.add_argument("branch", help="Branch name")
    checkout_parser.set_defaults(func=cmd_checkout)

    promote_parser = subparsers.add_parser(
        "promote", help="Copy a branch's content onto the main branch"
    )
    promote_parser.add_argument("source", help="Branch or revision to promote")
    promote_parser.add_argument("--message", "-m", required=True, help="Commit message")
    promote_parser.set_defaults(func=cmd_promote)

    purge_parser = subparsers.add_parser("purge", help="Delete all version history")
    purge_parser.set_defaults(func=cmd_purge)

    pack_parser = subparsers.add_parser("pack", help="Zip a subtree")
    pack_parser.add_argument("path", nargs="?", default="", help="Subtree to pack")
    pack_parser.add_argument("--output", "-o", required=True, help="Archive file")
    pack_parser.set_defaults(func=cmd_pack)

    unpack_parser = subparsers.add_parser("unpack", help="Extract an archive")
    unpack_parser.add_argument("archive", help="Archive file")
    unpack_parser.add_argument("destination", help="Destination directory")
    unpack_parser.set_defaults(func=cmd_unpack)

    push_parser = subparsers.add_parser("push", help="Upload a zipped subtree")
    push_parser.add_argument("path", nargs="?", default="", help="Subtree to push")
    push_parser.add_argument("--url", help="Remote base URL (default: from config)")
    push_parser.add_argument("--rel", default="", help="Path below the remote URL")
    push_parser.add_argument(
        "--key-env",
        default=DEFAULT_KEY_ENV,
        help="Environment variable holding a hex AES key; encrypts when set",
    )
    push_parser.set_defaults(func=cmd_push)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except IterspaceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid argument: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
