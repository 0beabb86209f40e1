"""CLI entrypoint for the campus coffee POS directory."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from campus_coffee.common.config_loader import ConfigBundle, load_config
from campus_coffee.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from campus_coffee.common.errors import CampusCoffeeError, DomainError
from campus_coffee.common.http import HttpClient
from campus_coffee.common.ids import generate_run_id
from campus_coffee.common.logging import build_logger, get_logger, log_event
from campus_coffee.osm.fetcher import OsmDataService
from campus_coffee.service.pos_service import PosService
from campus_coffee.storage.pos_store import PosStore


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])

    commands = parser.add_subparsers(dest="command", required=True)
    import_osm = commands.add_parser("import-osm", help="Import a POS from an OpenStreetMap node")
    import_osm.add_argument("node_id", type=int)
    commands.add_parser("list", help="List all POS")
    get = commands.add_parser("get", help="Show a single POS")
    get.add_argument("pos_id", type=int)
    commands.add_parser("clear", help="Delete all POS")
    return parser.parse_args(argv)


def build_service(bundle: ConfigBundle, data_dir: Path, logger: logging.Logger) -> PosService:
    http_client = HttpClient(
        timeout=bundle.osm_timeout(),
        retry=bundle.osm_retry(),
        user_agent=bundle.osm["user_agent"],
        rate_limit_per_sec=float(bundle.osm["rate_limit_per_sec"]),
    )
    osm_data_service = OsmDataService(http_client, base_url=bundle.osm["base_url"], logger=logger, owns_client=True)
    store = PosStore(bundle.pos_store_path(data_dir))
    return PosService(store, osm_data_service, logger=logger)


def execute_command(args: argparse.Namespace, service: PosService):
    if args.command == "import-osm":
        return service.import_from_osm_node(args.node_id).to_dict()
    if args.command == "list":
        return [pos.to_dict() for pos in service.get_all()]
    if args.command == "get":
        return service.get_by_id(args.pos_id).to_dict()
    if args.command == "clear":
        service.clear()
        return {"cleared": True}
    raise ValueError(f"Unknown command: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    bundle = load_config(config_dir, overlay_config_dir=overlay_config_dir)
    service = build_service(bundle, data_dir, logger)

    log_event(logger, "command start", command=args.command, event="COMMAND_START", status="ok")
    try:
        result = execute_command(args, service)
    except DomainError as exc:
        log_event(
            logger,
            f"command failed: {exc}",
            level=logging.ERROR,
            command=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_PARTIAL
    finally:
        service.osm_data_service.close()

    print(json.dumps(result, ensure_ascii=False, indent=2, sort_keys=True))
    log_event(logger, "command end", command=args.command, event="COMMAND_END", status="ok")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except CampusCoffeeError as exc:
        get_logger().error("hard failure: %s", exc, extra={"error_code": exc.error_code, "status": "error"})
        return EXIT_HARD_FAIL
    except Exception:
        get_logger().exception("unexpected failure", extra={"error_code": "UNEXPECTED_ERROR", "status": "error"})
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
