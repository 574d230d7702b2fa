"""Render a one-off snapshot of the board: ``python -m task_board``."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from task_board.api import TaskApi
from task_board.board import TaskBoard
from task_board.config import inject_api_base, load_page_template, resolve_api_base
from task_board.render import TaskPage
from task_board.state import SortOrder, TaskFilter


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="task_board", description=__doc__)
    parser.add_argument("--api-base", help="Task service base URL, e.g. http://host:8080/api")
    parser.add_argument("--filter", choices=[f.value for f in TaskFilter], default="all")
    parser.add_argument("--search", default="")
    parser.add_argument("--sort", choices=[s.value for s in SortOrder], default="newest")
    parser.add_argument("--output", type=Path, help="Write the page here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def snapshot(args: argparse.Namespace, transport=None) -> tuple[bool, str]:
    api_base = args.api_base or resolve_api_base()
    page = TaskPage(inject_api_base(load_page_template(), api_base))

    async with TaskApi(resolve_api_base(str(page)), transport=transport) as api:
        board = TaskBoard(api, page)
        loaded = await board.load()
        board.set_filter(args.filter)
        board.set_search(args.search)
        board.set_sort(args.sort)
    return loaded, str(page)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loaded, html = asyncio.run(snapshot(args))
    if args.output:
        args.output.write_text(html, encoding="utf-8")
    else:
        sys.stdout.write(html)
    return 0 if loaded else 1


if __name__ == "__main__":
    sys.exit(main())
