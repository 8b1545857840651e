"""Command line quick add: ``quickadd "Call mom next friday at 2:30pm !3 *calls"``."""

from __future__ import annotations

import argparse
import asyncio
import sys

from .config import settings, setup_logging
from .nlp.parser import get_parser
from .schemas import ParsedTask
from .vikunja import VikunjaClient, VikunjaError


def format_parsed(task: ParsedTask) -> str:
    lines = [f"  Title: '{task.title}'"]
    if task.labels:
        lines.append(f"  Labels: {', '.join(task.labels)}")
    if task.assignees:
        lines.append(f"  Assignees: {', '.join(task.assignees)}")
    if task.project:
        lines.append(f"  Project: {task.project}")
    if task.priority is not None:
        lines.append(f"  Priority: {task.priority}")
    if task.due_date:
        lines.append(f"  Due date: {task.due_date:%Y-%m-%d %H:%M} UTC")
    if task.repeat_interval:
        lines.append(f"  Repeats: every {task.repeat_interval.amount} {task.repeat_interval.interval_type}")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quickadd",
        description="Quick task creation for Vikunja using Quick Add Magic syntax.",
    )
    parser.add_argument("task", help="Task description with Quick Add Magic syntax")
    parser.add_argument("-u", "--url", help="Vikunja instance URL (default: VIKUNJA_URL)")
    parser.add_argument("-t", "--token", help="Authentication token (default: VIKUNJA_TOKEN)")
    parser.add_argument(
        "-p",
        "--project",
        help="Default project id or name (default: VIKUNJA_DEFAULT_PROJECT, else 1)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Only show how the text is parsed")
    return parser


async def create(text: str, url: str, token: str, project: str) -> dict:
    async with VikunjaClient(url, token) as client:
        project_id = await client.resolve_default_project(project)
        return await client.create_task_with_magic(text, project_id)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging()

    if args.dry_run:
        print(f"Parsing: {args.task}")
        print(format_parsed(get_parser().parse(args.task)))
        return 0

    url = args.url or settings.vikunja_url
    token = args.token or settings.vikunja_token
    if not url:
        print("Error: no Vikunja URL specified. Use --url or set VIKUNJA_URL.", file=sys.stderr)
        return 1
    if not token:
        print("Error: no auth token specified. Use --token or set VIKUNJA_TOKEN.", file=sys.stderr)
        return 1

    print(f"Creating task with Quick Add Magic: {args.task}")
    try:
        task = asyncio.run(create(args.task, url, token, args.project or settings.vikunja_default_project))
    except VikunjaError as e:
        print(f"Failed to create task: {e}", file=sys.stderr)
        return 1

    print("Task created successfully!")
    print(f"  ID: {task['id']}")
    print(f"  Title: {task['title']}")
    print(f"  Project: {task['project_id']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
