#!/usr/bin/env python3
"""
Stockroom management CLI.

Usage:
    python manage.py serve                 Start the API server
    python manage.py migrate               Apply pending database migrations
    python manage.py import-stock FILE     Reconcile stock from a count sheet
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from src.config import configure_logging, get_settings
from src.core.exceptions import StockroomError


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return
    for result in results:
        print(f"  v{result.version}_{result.name}: applied in {result.execution_time_ms}ms")


async def _import_stock(path: Path, user_id: int | None) -> dict:
    from src.application.use_cases import ImportStockSheetUseCase
    from src.infrastructure.storage.sqlite import close_pool
    from src.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    await initialize_database()
    try:
        use_case = ImportStockSheetUseCase()
        result = await use_case.execute(path.read_bytes(), path.name, user_id=user_id)
        return use_case.to_response(result).model_dump(mode="json", by_alias=True)
    finally:
        await close_pool()


def cmd_import_stock(args: argparse.Namespace) -> None:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: {path} does not exist.")
        sys.exit(1)

    try:
        response = asyncio.run(_import_stock(path, args.user_id))
    except StockroomError as e:
        print(f"Error [{e.code}]: {e.message}")
        sys.exit(1)

    if args.json:
        print(json.dumps(response, indent=2))
        return

    print(
        f"Updated {response['updatedCount']} item(s), "
        f"{response['errorCount']} error(s), {response['skippedCount']} skipped row(s)."
    )
    for row in response["results"]:
        print(f"  {row['name']}: {row['oldQuantity']} -> {row['newQuantity']}")
    for err in response["errors"]:
        print(f"  ERROR {err['item']}: {err['error']}")
    for row in response["skipped"]:
        print(f"  SKIPPED row {row['rowNumber']}: {row['reason']}")
    if response["errorCount"]:
        sys.exit(2)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stockroom management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending database migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # import-stock
    p_import = sub.add_parser("import-stock", help="Reconcile stock from a count sheet")
    p_import.add_argument("file", help="Path to an .xlsx, .xls or .csv file")
    p_import.add_argument("--user-id", type=int, default=None, help="Acting user ID")
    p_import.add_argument("--json", action="store_true", help="Print the full JSON result")
    p_import.set_defaults(func=cmd_import_stock)

    args = parser.parse_args()
    configure_logging()
    args.func(args)


if __name__ == "__main__":
    main()
