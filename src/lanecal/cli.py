from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import List, Optional

from .bootstrap import configure_logging
from .config import get_settings
from .core.window import window_for
from .domain import CalendarView
from .services import CalendarService, RenderedView, ServiceContext, render_view
from .services.http import run_local_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Lanecal command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the HTTP API.")
    api_parser.add_argument("--host", default=settings.server.host)
    api_parser.add_argument("--port", type=int, default=settings.server.port)

    agenda_parser = subparsers.add_parser("agenda", help="Print the laid-out events of a view.")
    agenda_parser.add_argument("--view", choices=[view.value for view in CalendarView], default="week")
    agenda_parser.add_argument("--anchor", help="ISO timestamp or date; defaults to now (UTC).")

    return parser


def _parse_anchor(raw: Optional[str], now: datetime) -> datetime:
    if not raw:
        return now
    parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed


def format_view(rendered: RenderedView) -> List[str]:
    lines = [rendered.label]
    for day in rendered.days:
        lines.append(f"{day.day:%a %Y-%m-%d}  ({day.lane_count} lanes)")
        for banner in day.banners:
            lines.append(f"  [all day] {banner.title}")
        for positioned in day.segments:
            segment = positioned.segment
            lines.append(
                f"  {segment.start:%H:%M}-{segment.end:%H:%M}  lane {positioned.lane + 1}/{positioned.lane_count}"
                f"  {segment.event.title}"
            )
    for week in rendered.weeks:
        cells = []
        for cell in week:
            marker = f"{cell.day.day:>2}" if cell.in_month else f"({cell.day.day})"
            count = len(cell.events) + cell.hidden_count
            cells.append(f"{marker}:{count}" if count else marker)
        lines.append("  ".join(cells))
    return lines


def run_agenda(view: str, anchor: Optional[str]) -> None:
    context = ServiceContext()
    service = CalendarService(context)
    now = context.now()
    anchor_dt = _parse_anchor(anchor, now)
    calendar_settings = context.settings.calendar
    window = window_for(anchor_dt, CalendarView(view), week_start=calendar_settings.week_start)
    events = service.list_events(window)
    rendered = render_view(anchor_dt, CalendarView(view), events, calendar_settings, now=now)
    for line in format_view(rendered):
        print(line)


def main() -> None:
    configure_logging()
    logger.info("Lanecal CLI starting")
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "api":
        run_local_server(host=args.host, port=args.port)
    elif args.command == "agenda":
        run_agenda(args.view, args.anchor)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
