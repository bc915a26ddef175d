from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, TextIO
from uuid import UUID

from dotenv import load_dotenv

from syncledger.adapters.protocol import (
    dump_catalog,
    dump_status_message,
    parse_catalog,
    parse_catalog_payload,
    parse_refreshes,
    translate_catalog,
    parse_status_messages,
)
from syncledger.app import plan_clear_run, plan_sync_run, reconcile_run
from syncledger.config import configure_logging, get_sync_config
from syncledger.domain.model import RefreshStream, RefreshType, StreamKey

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from syncledger.adapters.protocol import ConfiguredCatalogPayload
    from syncledger.domain.model import ConfiguredCatalog

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track generations and completion of sync runs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    assign = subparsers.add_parser("assign", help="Stamp a catalog for a sync or refresh job")
    _add_planning_arguments(assign)
    assign.add_argument(
        "--refreshes",
        type=Path,
        help="JSON file holding a list of refresh requests",
    )
    assign.add_argument(
        "--truncate",
        action="append",
        type=_parse_stream_key,
        default=[],
        metavar="STREAM",
        help="Stream to truncate, as NAME or NAMESPACE/NAME (repeatable)",
    )
    assign.add_argument(
        "--merge",
        action="append",
        type=_parse_stream_key,
        default=[],
        metavar="STREAM",
        help="Stream to refresh without truncation, as NAME or NAMESPACE/NAME (repeatable)",
    )

    clear = subparsers.add_parser("clear", help="Stamp a catalog for a clear job")
    _add_planning_arguments(clear)
    clear.add_argument(
        "--stream",
        action="append",
        type=_parse_stream_key,
        required=True,
        metavar="STREAM",
        help="Stream to clear, as NAME or NAMESPACE/NAME (repeatable)",
    )

    complete = subparsers.add_parser(
        "complete",
        help="Synthesize completion statuses once the reporting process has exited",
    )
    complete.add_argument("--catalog", type=Path, required=True, help="Configured catalog JSON")
    complete.add_argument(
        "--messages",
        type=str,
        default="-",
        help="Newline-delimited protocol messages, '-' for stdin (default: %(default)s)",
    )
    complete.add_argument(
        "--exit-code",
        type=int,
        required=True,
        help="Exit code of the reporting process",
    )
    complete.add_argument(
        "--refreshes-supported",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Whether the destination supports refreshes (defaults to config)",
    )

    return parser.parse_args(list(argv))


def _add_planning_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--catalog", type=Path, required=True, help="Configured catalog JSON")
    parser.add_argument("--job-id", type=int, required=True, help="Identifier of the job")
    parser.add_argument(
        "--connection-id",
        type=_parse_uuid,
        required=True,
        help="Connection whose generation history should be used",
    )


def _parse_stream_key(value: str) -> StreamKey:
    namespace, separator, name = value.strip().rpartition("/")
    if not name:
        raise ValueError(f"Invalid stream: {value!r}")
    if not separator:
        return StreamKey(name)
    if not namespace:
        raise ValueError(f"Invalid stream namespace: {value!r}")
    return StreamKey(name, namespace)


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _refreshes_from_args(args: argparse.Namespace) -> list[RefreshStream]:
    refreshes: list[RefreshStream] = []
    if args.refreshes is not None:
        refreshes.extend(parse_refreshes(args.refreshes.read_bytes()))
    refreshes.extend(
        RefreshStream(stream=key, refresh_type=RefreshType.TRUNCATE) for key in args.truncate
    )
    refreshes.extend(
        RefreshStream(stream=key, refresh_type=RefreshType.MERGE) for key in args.merge
    )
    return refreshes


def _write_catalog(
    catalog: ConfiguredCatalog, source: ConfiguredCatalogPayload, out: TextIO
) -> None:
    out.write(dump_catalog(catalog, source=source).model_dump_json(exclude_none=True, indent=2))
    out.write("\n")


def _run_complete(args: argparse.Namespace, out: TextIO) -> None:
    config = get_sync_config()
    refreshes_supported = (
        config.refreshes_supported
        if args.refreshes_supported is None
        else args.refreshes_supported
    )
    catalog = parse_catalog(args.catalog.read_bytes())
    if args.messages == "-":
        statuses = list(parse_status_messages(sys.stdin))
    else:
        with Path(args.messages).open(encoding="utf-8") as handle:
            statuses = list(parse_status_messages(handle))

    messages = reconcile_run(
        catalog,
        statuses,
        exit_code=args.exit_code,
        refreshes_supported=refreshes_supported,
        mapper=config.build_mapper(),
    )
    for message in messages:
        out.write(dump_status_message(message).model_dump_json(exclude_none=True))
        out.write("\n")


def main(argv: Sequence[str] | None = None, *, out: TextIO | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    stream = out or sys.stdout
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command in {"assign", "clear"} and parsed_args.job_id < 0:
            raise ValueError("Job id must be non-negative")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "assign":
            source = parse_catalog_payload(parsed_args.catalog.read_bytes())
            catalog = plan_sync_run(
                translate_catalog(source),
                job_id=parsed_args.job_id,
                connection_id=parsed_args.connection_id,
                refreshes=_refreshes_from_args(parsed_args),
            )
            _write_catalog(catalog, source, stream)
        elif parsed_args.command == "clear":
            source = parse_catalog_payload(parsed_args.catalog.read_bytes())
            catalog = plan_clear_run(
                translate_catalog(source),
                job_id=parsed_args.job_id,
                connection_id=parsed_args.connection_id,
                cleared_streams=parsed_args.stream,
            )
            _write_catalog(catalog, source, stream)
        elif parsed_args.command == "complete":
            _run_complete(parsed_args, stream)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error while processing %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
