"""tvm command router: maps verbs onto the core operations."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from tvm_core.app import TvmApp
from tvm_core.errors import NotInstalledError, TvmError
from tvm_core.selector import InteractiveSelector
from tvm_core.store import RemovalReport
from tvm_core.versions import normalize_version_spec

CLI_VERSION = "0.1.0"

_COMMANDS: dict[str, str] = {
    "<version>": "install (or activate) the given X.Y.Z version",
    "latest": "install the latest published version",
    "use <version> [args]": "activate a version and run it with args",
    "bin <version>": "print the entry-point path of an installed version",
    "rm <version...>": "remove installed versions",
    "prev": "activate the previously active version",
    "installed": "list installed versions",
    "current": "print the active version",
    "prune [--keep N]": "remove all but the newest N versions and the active one",
    "ls": "list published versions",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tvm", add_help=False)
    parser.add_argument("-h", "--help", action="store_true", help="show this help")
    parser.add_argument("--version", action="store_true", help="print the tvm version")
    parser.add_argument("--latest", action="store_true", help="print the latest published version")
    parser.add_argument("--root", help="directory holding installed versions")
    parser.add_argument("--bin-dir", dest="bin_dir", help="directory holding the activation link")
    parser.add_argument("--package", help="package name of the managed tool")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("command", nargs=argparse.REMAINDER)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    app: TvmApp | None = None,
    read_key: Callable[[], str] | None = None,
) -> int:
    """Resolve and run a tvm command."""

    tokens = list(argv) if argv is not None else list(sys.argv[1:])
    parser = build_parser()
    try:
        args = parser.parse_args(tokens)
    except SystemExit as exc:
        return exc.code or 0

    if args.help:
        return _print_overview()
    if args.version:
        print(f"tvm v{CLI_VERSION}")
        return 0

    try:
        if app is None:
            app = TvmApp(
                cli_overrides={
                    "root": args.root,
                    "bin_dir": args.bin_dir,
                    "package": args.package,
                }
            )
        _configure_logging(app, verbose=args.verbose)
        if args.latest:
            print(app.registry.latest_version())
            return 0
        return _dispatch(app, args.command, read_key=read_key)
    except (TvmError, ValueError, OSError) as exc:
        print(f"[tvm] error: {exc}", file=sys.stderr)
        return 1
    except SystemExit as exc:
        return exc.code or 0
    except KeyboardInterrupt:
        return 130


def _configure_logging(app: TvmApp, *, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, app.config.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _dispatch(app: TvmApp, command: list[str], *, read_key: Callable[[], str] | None) -> int:
    if not command:
        return _handle_select(app, read_key)
    verb, rest = command[0], command[1:]
    handler = _HANDLERS.get(verb)
    if handler is not None:
        return handler(app, rest)
    if verb.lstrip("v")[:1].isdigit():
        return _handle_install(app, verb)
    print(f"[tvm] unknown command {verb!r}; see `tvm --help`", file=sys.stderr)
    return 1


def _verb_parser(verb: str) -> argparse.ArgumentParser:
    return argparse.ArgumentParser(prog=f"tvm {verb}")


def _handle_select(app: TvmApp, read_key: Callable[[], str] | None) -> int:
    versions = app.store.list_installed()
    if not versions:
        raise NotInstalledError("no versions installed; run `tvm <version>` or `tvm latest`")
    result = InteractiveSelector(app.activator, read_key=read_key).run(versions)
    print(f"[tvm] active={result.version}")
    return 0


def _handle_install(app: TvmApp, spec: str) -> int:
    version = normalize_version_spec(spec)
    if not app.store.is_installed(version):
        print(f"[tvm] installing {app.config.package}@{version}")
    result = app.installer.install(version)
    print(f"[tvm] active={result.active or result.version}")
    return 0


def _handle_latest(app: TvmApp, rest: list[str]) -> int:
    version = app.registry.latest_version()
    print(f"[tvm] resolved latest: {version}")
    return _handle_install(app, str(version))


def _handle_use(app: TvmApp, rest: list[str]) -> int:
    if not rest:
        raise ValueError("usage: tvm use <version> [args...]")
    version = normalize_version_spec(rest[0])
    return app.activator.run(version, rest[1:])


def _handle_bin(app: TvmApp, rest: list[str]) -> int:
    parser = _verb_parser("bin")
    parser.add_argument("version")
    args = parser.parse_args(rest)
    print(app.activator.entry_point(normalize_version_spec(args.version)))
    return 0


def _handle_rm(app: TvmApp, rest: list[str]) -> int:
    parser = _verb_parser("rm")
    parser.add_argument("versions", nargs="+")
    args = parser.parse_args(rest)
    versions = [normalize_version_spec(v) for v in args.versions]
    report = app.store.remove_many(versions)
    return _print_removal(report)


def _handle_prev(app: TvmApp, rest: list[str]) -> int:
    result = app.activator.rollback()
    print(f"[tvm] active={result.version}")
    return 0


def _handle_ls(app: TvmApp, rest: list[str]) -> int:
    versions = app.registry.published_versions()
    if not versions:
        print("(no versions)")
        return 0
    for version in versions:
        print(version)
    return 0


def _handle_installed(app: TvmApp, rest: list[str]) -> int:
    versions = app.store.list_installed()
    if not versions:
        print("[tvm] no versions installed")
        return 0
    active = app.activator.resolve_active_version()
    for version in versions:
        marker = "*" if version == active else " "
        print(f"{marker} {version}")
    return 0


def _handle_current(app: TvmApp, rest: list[str]) -> int:
    active = app.activator.resolve_active_version()
    if active is None:
        return 1
    print(active)
    return 0


def _handle_prune(app: TvmApp, rest: list[str]) -> int:
    parser = _verb_parser("prune")
    parser.add_argument("--keep", type=int, default=1, help="how many newest versions to keep")
    args = parser.parse_args(rest)
    report = app.prune(keep=args.keep)
    if not report.removed and report.ok:
        print("[tvm] nothing pruned")
        return 0
    return _print_removal(report)


def _print_removal(report: RemovalReport) -> int:
    for version in report.removed:
        print(f"[tvm] removed {version}")
    for version in report.missing:
        print(f"[tvm] {version} not installed, skipped")
    for version, message in report.failed.items():
        print(f"[tvm] error: could not remove {version}: {message}", file=sys.stderr)
    return 0 if report.ok else 1


def _print_overview() -> int:
    """Show the global help listing."""

    print("Usage: tvm [options] [command] [args...]\n")
    print("Commands:")
    print(f"  {'(none)':<30} pick the active version interactively")
    for usage, description in _COMMANDS.items():
        print(f"  {usage:<30} {description}")
    print("\nOptions:")
    print(f"  {'--latest':<30} print the latest published version")
    print(f"  {'--root DIR':<30} directory holding installed versions")
    print(f"  {'--bin-dir DIR':<30} directory holding the activation link")
    print(f"  {'--package NAME':<30} package name of the managed tool")
    print(f"  {'--verbose':<30} enable debug logging")
    print(f"  {'--version':<30} print the tvm version")
    return 0


_HANDLERS: dict[str, Callable[[TvmApp, list[str]], int]] = {
    "latest": _handle_latest,
    "use": _handle_use,
    "bin": _handle_bin,
    "rm": _handle_rm,
    "prev": _handle_prev,
    "ls": _handle_ls,
    "installed": _handle_installed,
    "current": _handle_current,
    "prune": _handle_prune,
}
