#!/usr/bin/env python3
"""CLI tool for inspecting and editing subway lines.

Usage:
    # List all lines with their terminals
    uv run python -m app.cli list-lines

    # Show a line's stations in order, with section distances
    uv run python -m app.cli show-line <line-id>

    # Add a section to a line
    uv run python -m app.cli add-section <line-id> <up-station-id> <down-station-id> <distance>

    # Remove a station from a line
    uv run python -m app.cli remove-section <line-id> <station-id>
"""

import argparse
import asyncio
import sys
import uuid
from collections.abc import Awaitable, Callable

from fastapi import HTTPException

from app.core.config import require_config
from app.core.database import session_scope
from app.domain import Line
from app.repositories import SqlLineRepository, SqlStationRepository
from app.services.line_service import LineService

CommandHandler = Callable[[argparse.Namespace, LineService], Awaitable[int]]


def _parse_uuid(value: str, label: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(value)
    except ValueError:
        print(f"❌ Error: Invalid {label} UUID '{value}'", file=sys.stderr)
        return None


def _error_detail(error: HTTPException) -> str:
    detail = error.detail
    if isinstance(detail, dict):
        return f"{detail.get('message')} ({detail.get('code')})"
    return str(detail)


def _print_line(line: Line) -> None:
    print(f"{line.name} ({line.color}) - {len(line.sections)} section(s), total distance {line.total_distance}")
    print(f"   Line ID: {line.id}")
    print()
    for index, section in enumerate(line.sections):
        if index == 0:
            print(f"   {section.up_station.name}")
        print(f"     | {section.distance}")
        print(f"   {section.down_station.name}")


async def cmd_list_lines(args: argparse.Namespace, service: LineService) -> int:
    """
    List all lines.

    Args:
        args: Parsed command-line arguments
        service: Line service

    Returns:
        Exit code (0 for success, 1 for error)
    """
    lines = await service.list_lines()

    if not lines:
        print("No lines found")
        return 0

    print(f"Found {len(lines)} line(s):\n")
    print(f"{'Line ID':<38} {'Name':<20} {'Sections':<9} Terminals")
    print("-" * 110)

    for line in lines:
        stations = line.get_stations()
        terminals = f"{stations[0].name} -> {stations[-1].name}" if stations else "-"
        print(f"{line.id!s:<38} {line.name:<20} {len(line.sections):<9} {terminals}")

    return 0


async def cmd_show_line(args: argparse.Namespace, service: LineService) -> int:
    """
    Show a line's stations from upstream to downstream terminal.

    Args:
        args: Parsed command-line arguments
        service: Line service

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if (line_id := _parse_uuid(args.line_id, "line")) is None:
        return 1

    try:
        line = await service.get_line(line_id)
    except HTTPException as e:
        print(f"❌ Error: {_error_detail(e)}", file=sys.stderr)
        return 1

    _print_line(line)
    return 0


async def cmd_add_section(args: argparse.Namespace, service: LineService) -> int:
    """
    Add a section to a line.

    Args:
        args: Parsed command-line arguments
        service: Line service

    Returns:
        Exit code (0 for success, 1 for error)
    """
    line_id = _parse_uuid(args.line_id, "line")
    up_station_id = _parse_uuid(args.up_station_id, "up station")
    down_station_id = _parse_uuid(args.down_station_id, "down station")
    if line_id is None or up_station_id is None or down_station_id is None:
        return 1

    try:
        line = await service.add_section(line_id, up_station_id, down_station_id, args.distance)
    except HTTPException as e:
        print(f"❌ Error: {_error_detail(e)}", file=sys.stderr)
        return 1

    print("✅ Added section successfully!")
    _print_line(line)
    return 0


async def cmd_remove_section(args: argparse.Namespace, service: LineService) -> int:
    """
    Remove a station from a line.

    Args:
        args: Parsed command-line arguments
        service: Line service

    Returns:
        Exit code (0 for success, 1 for error)
    """
    line_id = _parse_uuid(args.line_id, "line")
    station_id = _parse_uuid(args.station_id, "station")
    if line_id is None or station_id is None:
        return 1

    try:
        line = await service.remove_section(line_id, station_id)
    except HTTPException as e:
        print(f"❌ Error: {_error_detail(e)}", file=sys.stderr)
        return 1

    print("✅ Removed station successfully!")
    _print_line(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Subway line management CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List lines
  uv run python -m app.cli list-lines

  # Show the stations of a line in order
  uv run python -m app.cli show-line 550e8400-e29b-41d4-a716-446655440000

  # Insert a station 3 units after an existing one
  uv run python -m app.cli add-section <line-id> <existing-station-id> <new-station-id> 3

  # Remove a station (its neighbours are joined)
  uv run python -m app.cli remove-section <line-id> <station-id>
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser(
        "list-lines",
        help="List all lines",
        description="Display every line with its section count and terminals.",
    )

    show_line_parser = subparsers.add_parser(
        "show-line",
        help="Show a line's stations in order",
        description="Display the stations of a line from upstream to downstream terminal with distances.",
    )
    show_line_parser.add_argument("line_id", type=str, help="Line UUID")

    add_section_parser = subparsers.add_parser(
        "add-section",
        help="Add a section to a line",
        description="Add a section sharing exactly one station with the line. "
        "Sections landing mid-line split the existing section.",
    )
    add_section_parser.add_argument("line_id", type=str, help="Line UUID")
    add_section_parser.add_argument("up_station_id", type=str, help="Upstream station UUID")
    add_section_parser.add_argument("down_station_id", type=str, help="Downstream station UUID")
    add_section_parser.add_argument("distance", type=int, help="Section distance (positive integer)")

    remove_section_parser = subparsers.add_parser(
        "remove-section",
        help="Remove a station from a line",
        description="Remove a station; an interior station's two sections are merged.",
    )
    remove_section_parser.add_argument("line_id", type=str, help="Line UUID")
    remove_section_parser.add_argument("station_id", type=str, help="Station UUID")

    return parser


COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "list-lines": cmd_list_lines,
    "show-line": cmd_show_line,
    "add-section": cmd_add_section,
    "remove-section": cmd_remove_section,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if handler := COMMAND_HANDLERS.get(args.command):
        require_config("DATABASE_URL")

        async def run_with_session() -> int:
            try:
                async with session_scope() as session:
                    service = LineService(SqlLineRepository(session), SqlStationRepository(session))
                    return await handler(args, service)
            except Exception as e:
                print(f"❌ Unexpected error: {e}", file=sys.stderr)
                return 1

        return asyncio.run(run_with_session())

    print(f"❌ Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
