"""
Administrative command line for the audited settings store.

Examples:

    flag-edge-settings --dsn postgres://localhost/edge get unleash.frontend
    flag-edge-settings set unleash.frontend '{"enabled": true}' --actor admin
    flag-edge-settings delete unleash.frontend --actor admin
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from edge_shared.config import BaseConfig
from edge_shared.errors import EdgeException, NotFoundError
from edge_shared.logging import configure_logging, get_logger

from .service import SettingService
from .stores import build_stores

logger = get_logger("settings.cli")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    config = BaseConfig()
    parser = argparse.ArgumentParser(prog="flag-edge-settings", description="Manage audited settings.")
    parser.add_argument("--dsn", default=config.settings_dsn, help="PostgreSQL DSN for settings and events")
    parser.add_argument("--log-level", default="warning", help="Log level")
    commands = parser.add_subparsers(dest="command", required=True)

    get_cmd = commands.add_parser("get", help="Print a setting value as JSON")
    get_cmd.add_argument("key")

    set_cmd = commands.add_parser("set", help="Create or update a setting")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value", type=json.loads, help="JSON document")
    set_cmd.add_argument("--actor", required=True, help="Acting principal recorded on the audit event")

    delete_cmd = commands.add_parser("delete", help="Delete a setting")
    delete_cmd.add_argument("key")
    delete_cmd.add_argument("--actor", required=True, help="Acting principal recorded on the audit event")

    return parser.parse_args(argv)


def _build_service(dsn: Optional[str]) -> SettingService:
    if not dsn:
        logger.warning("No settings DSN configured, using in-memory stores; changes are lost when the command exits")
    setting_store, event_store = build_stores(dsn)
    return SettingService(setting_store, event_store)


async def run(args: argparse.Namespace, service: SettingService) -> Any:
    """Execute one command against ``service`` and return the printable result."""
    try:
        await service.setting_store.start()
        await service.event_store.start()
        if args.command == "get":
            return await service.get(args.key)
        if args.command == "set":
            await service.insert(args.key, args.value, args.actor)
            return {"id": args.key, "status": "saved"}
        await service.delete(args.key, args.actor)
        return {"id": args.key, "status": "deleted"}
    finally:
        await service.event_store.stop()
        await service.setting_store.stop()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging("settings", args.log_level, stream=sys.stderr)
    service = _build_service(args.dsn)

    try:
        result = asyncio.run(run(args, service))
    except KeyboardInterrupt:
        return 130
    except NotFoundError as exc:
        print(f"[settings] {exc.message}", file=sys.stderr)
        return 1
    except EdgeException as exc:
        print(f"[settings] failed: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
