"""CLI entrypoints for ampscript commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .models import DetectionMode, InsertionMode
from .pipeline import ImportOptions, ScriptImporter, SourceDocument


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write timestamped log records to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .ampscript.yml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ampscript",
        description="Add the AMP runtime and extension scripts an AMP HTML document needs.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    inject_parser = subparsers.add_parser(
        "inject",
        help="Insert missing script tags into AMP HTML files.",
    )
    _add_verbose_option(inject_parser, suppress_default=True)
    _add_log_file_option(inject_parser, suppress_default=True)
    _add_config_option(inject_parser)
    inject_parser.add_argument("paths", nargs="+", help="AMP HTML files to process.")
    inject_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in InsertionMode],
        help="Replace a placeholder token or insert before </head>.",
    )
    inject_parser.add_argument(
        "--placeholder",
        help="Token replaced with script tags in placeholder mode.",
    )
    inject_parser.add_argument(
        "--detection",
        choices=[mode.value for mode in DetectionMode],
        help="Detect requirements by scanning the markup or by running amphtml-validator.",
    )
    inject_parser.add_argument(
        "--force-latest",
        action="store_true",
        default=None,
        help="Load 'latest' for every component without a pinned version.",
    )
    inject_parser.add_argument(
        "--update-versions",
        action="store_true",
        help="Refresh the component version map before processing.",
    )
    inject_parser.add_argument(
        "--write",
        action="store_true",
        help="Rewrite files in place instead of printing the result.",
    )

    update_parser = subparsers.add_parser(
        "update-versions",
        help="Refresh the component version map from the AMP repository listing.",
    )
    _add_verbose_option(update_parser, suppress_default=True)
    _add_log_file_option(update_parser, suppress_default=True)
    _add_config_option(update_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP injection service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ampscript commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        try:
            from .service import run_service
        except ModuleNotFoundError as exc:
            parser.exit(1, f"Service mode requires the 'service' extra: {exc}\n")
        run_service(
            host=args.host,
            port=args.port,
            importer_factory=lambda: ScriptImporter.from_config(config),
        )
        return

    importer = ScriptImporter.from_config(config)

    if args.command == "update-versions":
        try:
            versions = importer.refresh_versions()
        except Exception as exc:  # pragma: no cover - network failures
            parser.exit(1, f"ampscript update-versions failed: {exc}\n")
        print(f"Recorded versions for {len(versions)} components in {_relativize(config.cache_path)}")
    elif args.command == "inject":
        _run_inject(parser, args, config, importer)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_inject(parser, args, config, importer: ScriptImporter) -> None:  # noqa: ANN001
    options = ImportOptions.from_config(config)
    if args.mode:
        options.mode = InsertionMode(args.mode)
    if args.placeholder:
        options.placeholder = args.placeholder
    if args.detection:
        options.detection = DetectionMode(args.detection)
    if args.force_latest:
        options.force_latest = True
    options.update_versions = bool(args.update_versions)

    paths = [Path(raw) for raw in args.paths]
    if len(paths) > 1 and not args.write:
        parser.exit(1, "Printing supports one file at a time; pass --write to update several files.\n")
    for path in paths:
        if not path.is_file():
            parser.exit(1, f"File not found: {path}\n")

    documents = (
        SourceDocument(path=path, content=path.read_text(encoding="utf-8")) for path in paths
    )
    logger = get_logger("cli")
    failures = 0
    for outcome in importer.transform(documents, options):
        # Refresh once per run, not once per file.
        options.update_versions = False
        if outcome.error is not None:
            failures += 1
            continue
        if args.write:
            if outcome.changed:
                outcome.path.write_text(outcome.content, encoding="utf-8")
                print(f"Updated {_relativize(outcome.path)}")
            else:
                logger.info("%s already up to date", _relativize(outcome.path))
        else:
            sys.stdout.write(str(outcome.content))

    if failures:
        parser.exit(1, f"ampscript inject failed for {failures} file(s). Run with --verbose for more details.\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
