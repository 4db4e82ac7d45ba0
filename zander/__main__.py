"""Entry point for the Zander CLI."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from . import __version__
from .errors import StorageError, StorageErrorCode
from .log import configure_logging, logger
from .persistence import load_bundle, write_bundle
from .preferences import Preferences, create_backend, load_preferences
from .state import UNSET, AppState, State, get_visible_bookmarks
from .state.model import Category

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _add_branch(tree: Tree, category: Category, selected: str | None) -> None:
    label = Text(category.name)
    if category.id == selected:
        label.append(" *", style="bold")
    label.append(f" {category.id}", style="dim")
    branch = tree.add(label)
    for child in category.children:
        _add_branch(branch, child, selected)


def render_state(console: Console, state: State) -> None:
    """Print the category tree and the bookmarks visible under the selection."""
    tree = Tree("[bold]Categories[/bold]")
    for category in state.categories:
        _add_branch(tree, category, state.current_category_id)
    console.print(tree)

    table = Table(title="Bookmarks", show_lines=False)
    table.add_column("Title")
    table.add_column("URL")
    table.add_column("Id", style="dim")
    for bookmark in get_visible_bookmarks(state):
        table.add_row(Text(bookmark.title), Text(bookmark.url), Text(bookmark.id))
    console.print(table)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _dispatch(
    app: AppState, args: argparse.Namespace, console: Console
) -> State:
    cmd = args.command
    if cmd == "reset":
        # Hard overwrite: works even when the stored state is unreadable.
        return await app.reset_system()
    if cmd == "import":
        bundle = load_bundle(args.file)
        try:
            await app.load_initial_state()
        except StorageError as exc:
            if exc.code is not StorageErrorCode.INVALID_JSON:
                raise
            logger.warning("replacing unreadable stored state: %s", exc.message)
        return await app.import_data(bundle)

    await app.load_initial_state()

    if cmd == "add-category":
        return await app.add_category(args.parent, args.name)
    if cmd == "edit-category":
        return await app.update_category(args.id, name=args.name, color=args.color)
    if cmd == "move-category":
        return await app.move_category(args.id, args.direction)
    if cmd == "delete-category":
        return await app.delete_category(args.id)
    if cmd == "add-bookmark":
        return await app.add_bookmark(
            args.title, args.url, args.category, args.description
        )
    if cmd == "edit-bookmark":
        description = args.description if args.description is not None else UNSET
        if args.clear_description:
            description = None
        return await app.update_bookmark(
            args.id,
            title=args.title if args.title is not None else UNSET,
            url=args.url if args.url is not None else UNSET,
            description=description,
            category_id=args.category if args.category is not None else UNSET,
        )
    if cmd == "delete-bookmark":
        return await app.delete_bookmark(args.id)
    if cmd == "select":
        return await app.set_current_category(args.id)
    if cmd == "landing":
        return await app.set_landing_category(args.id)
    if cmd == "export":
        bundle = await app.export_data()
        write_bundle(bundle, args.file)
        console.print(f"Exported to {args.file}", markup=False)
        return bundle.state
    return await app.load_initial_state()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zander", description="Zander bookmarks")
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"zander {__version__}",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        default=None,
        help="Preferences file (default: ~/.zander/preferences.yaml)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Store state as JSON in this directory (overrides preferences)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("show", help="Show categories and visible bookmarks")

    p = sub.add_parser("add-category", help="Add a category")
    p.add_argument("name", nargs="?", default=None)
    p.add_argument("--parent", default=None, help="Parent category id")

    p = sub.add_parser("edit-category", help="Rename or recolour a category")
    p.add_argument("id")
    p.add_argument("--name", default=None)
    p.add_argument("--color", default=None)

    p = sub.add_parser("move-category", help="Move a category among its siblings")
    p.add_argument("id")
    p.add_argument("direction", choices=["up", "down"])

    p = sub.add_parser("delete-category", help="Delete a category and its bookmarks")
    p.add_argument("id")

    p = sub.add_parser("add-bookmark", help="Add a bookmark")
    p.add_argument("title")
    p.add_argument("url")
    p.add_argument("--category", default=None)
    p.add_argument("--description", default=None)

    p = sub.add_parser("edit-bookmark", help="Edit a bookmark")
    p.add_argument("id")
    p.add_argument("--title", default=None)
    p.add_argument("--url", default=None)
    p.add_argument("--description", default=None)
    p.add_argument("--clear-description", action="store_true")
    p.add_argument("--category", default=None)

    p = sub.add_parser("delete-bookmark", help="Delete a bookmark")
    p.add_argument("id")

    p = sub.add_parser("select", help="Select a category (omit id to clear)")
    p.add_argument("id", nargs="?", default=None)

    p = sub.add_parser("landing", help="Set the landing category (omit id to clear)")
    p.add_argument("id", nargs="?", default=None)

    p = sub.add_parser("export", help="Write an export bundle")
    p.add_argument("file", type=Path)

    p = sub.add_parser("import", help="Replace all data from an export bundle")
    p.add_argument("file", type=Path)

    sub.add_parser("reset", help="Erase all data")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the Zander CLI."""
    args = build_parser().parse_args(argv)

    prefs: Preferences = load_preferences(args.prefs)
    if args.data_dir is not None:
        prefs.storage.backend = "file"
        prefs.storage.data_dir = str(args.data_dir)
    configure_logging("DEBUG" if args.verbose else prefs.logging.level)

    console = Console()
    err_console = Console(stderr=True)
    app = AppState(create_backend(prefs))

    try:
        state = asyncio.run(_dispatch(app, args, console))
    except StorageError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        err_console.print(f"error [{exc.code.value}]: {exc.message}", markup=False)
        return 1

    if args.command != "export":
        render_state(console, state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
