import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .app import ResyncApp
from .config import SettingsStore, SETTINGS_PATH, VAULT_PATH
from .exceptions import HabiticaClientError
from .services.tasks.types import TaskCategory

logger = logging.getLogger(__name__)

PANE_CATEGORIES = [TaskCategory.HABIT.value, TaskCategory.DAILY.value, TaskCategory.TODO.value]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="habitica-resync",
        description="Sync Habitica tasks into Markdown notes, one note per task category."
    )
    ap.add_argument("--settings", default=SETTINGS_PATH,
                    help=f"Settings JSON file (default: env HABITICA_SETTINGS_PATH or {SETTINGS_PATH})")
    ap.add_argument("--vault", default=VAULT_PATH,
                    help="Vault root the notes folder is relative to (default: env HABITICA_VAULT_PATH or '.')")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("sync", help="Fetch all tasks, overwrite the category notes and print the live views if enabled")

    show = sub.add_parser("show", help="Fetch tasks and print the live view of one category (needs enable_pane)")
    show.add_argument("category", choices=PANE_CATEGORIES)

    sub.add_parser("check", help="Report whether the settings are complete")
    return ap


async def _run(app: ResyncApp, args: argparse.Namespace) -> int:
    if args.command == "sync":
        # Panes subscribe before the fetch so they receive its events
        panes = app.open_panes()
        try:
            written = await app.retrieve_notes()
            if written is None:
                print(f"Not functioning: {app.nonfunctional_reason}", file=sys.stderr)
                return 1
            if panes and not app.settings.enable_notes:
                if await app.run_or_notify(app.client.retrieve_tasks)() is None:
                    print(f"Not functioning: {app.nonfunctional_reason}", file=sys.stderr)
                    return 1
            for path in written:
                print(path)
            for pane in panes:
                print()
                print(pane.render())
        finally:
            app.close()
        return 0

    if args.command == "show":
        pane = app.open_pane(TaskCategory(args.category))
        try:
            fetched = await app.run_or_notify(app.client.retrieve_tasks)()
            if fetched is None:
                print(f"Not functioning: {app.nonfunctional_reason}", file=sys.stderr)
                return 1
            print(pane.render())
        finally:
            app.close()
        return 0

    if app.functioning:
        print("Settings are complete.")
        return 0
    print(f"Not functioning: {app.nonfunctional_reason}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = ResyncApp.from_store(SettingsStore(args.settings), vault_root=args.vault)
        return asyncio.run(_run(app, args))
    except HabiticaClientError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
