"""
Playhead CLI - inspect persisted player data and run the web backend.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.table import Table

from playhead.core import config as config_module
from playhead.core.console import get_console
from playhead.core.output import log, setup_from_config
from playhead.service import PlayerService

# Project root (where pyproject.toml and web/ live)
PROJECT_ROOT = Path(__file__).parent.parent.parent


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as M:SS (or H:MM:SS)."""
    if not seconds or seconds < 0:
        return "0:00"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def run_history(service: PlayerService, limit: int) -> int:
    history = service.store.history[:limit]
    if not history:
        log("No playback history yet.")
        return 0

    table = Table(title=f"Recently played ({len(history)})")
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Artist")
    table.add_column("Type")
    table.add_column("Played at")
    for i, entry in enumerate(history, 1):
        track = entry.track
        table.add_row(
            str(i),
            track.title,
            track.artist or track.subtitle or "",
            track.type,
            entry.played_at.strftime("%Y-%m-%d %H:%M"),
        )
    get_console().print(table)
    return 0


def run_resume(service: PlayerService) -> int:
    items = service.resume_items()
    if not items:
        log("Nothing to continue.")
        return 0

    table = Table(title="Continue watching")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Progress", justify="right")
    table.add_column("Left", justify="right")
    for item in items:
        table.add_row(
            item.track.title,
            item.track.type,
            f"{item.progress.percentage}%",
            format_time(item.progress.remaining),
        )
    get_console().print(table)
    return 0


def run_stats(service: PlayerService, days: int) -> int:
    stats = service.stats
    summary = stats.summary()
    console = get_console()

    console.print(
        f"[bold]Listened:[/bold] {summary.total_hours}h {summary.total_minutes}m  "
        f"[bold]Plays:[/bold] {summary.total_plays}  "
        f"[bold]Tracks:[/bold] {summary.unique_tracks}  "
        f"[bold]Artists:[/bold] {summary.unique_artists}"
    )
    console.print(
        f"[bold]Streak:[/bold] {summary.current_streak} days "
        f"(longest {summary.longest_streak})"
    )

    top = stats.top_tracks(limit=10)
    if top:
        table = Table(title="Top tracks")
        table.add_column("Plays", justify="right")
        table.add_column("Title")
        table.add_column("Artist")
        for entry in top:
            table.add_row(str(entry.play_count), entry.title or entry.track_id, entry.artist or "")
        console.print(table)

    table = Table(title=f"Last {days} days")
    table.add_column("Day")
    table.add_column("Date")
    table.add_column("Minutes", justify="right")
    for day in stats.listening_time_for_period(days=days):
        table.add_row(day.display_date, day.day.isoformat(), str(day.minutes))
    console.print(table)
    return 0


def run_init_config(force: bool) -> int:
    config_path = config_module.get_config_dir() / "config.toml"
    if config_path.exists() and not force:
        log(f"Configuration already exists at {config_path} (use --force to overwrite)", "warning")
        return 1
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config_module.create_default_config() + "\n", encoding="utf-8")
    log(f"Wrote default configuration to {config_path}")
    return 0


def run_serve(cfg: config_module.Config, host: Optional[str], port: Optional[int]) -> int:
    import uvicorn

    host = host or cfg.web.host
    port = port or cfg.web.port
    log(f"Starting Playhead web backend on http://{host}:{port}")
    uvicorn.run("web.backend.main:app", host=host, port=port, app_dir=str(PROJECT_ROOT))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playhead",
        description="Playhead - playback queue, history and resume state",
    )
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    history_parser = subparsers.add_parser("history", help="Show recently played tracks")
    history_parser.add_argument("--limit", type=int, default=20, help="Number of entries")

    subparsers.add_parser("resume", help="Show partially played tracks")

    stats_parser = subparsers.add_parser("stats", help="Show listening statistics")
    stats_parser.add_argument("--days", type=int, default=7, help="Days of daily totals")

    init_parser = subparsers.add_parser("init-config", help="Write a default config.toml")
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing file")

    serve_parser = subparsers.add_parser("serve", help="Run the web backend")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default from config)")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the playhead command."""
    args = build_parser().parse_args(argv)

    if args.subcommand == "init-config":
        return run_init_config(args.force)

    cfg = config_module.load_config()
    config_module.ensure_directories()
    try:
        setup_from_config(cfg.logging)
    except OSError as e:
        print(f"Error: could not open log file: {e}", file=sys.stderr)
        return 1

    if args.subcommand == "serve":
        return run_serve(cfg, args.host, args.port)

    service = PlayerService(cfg)
    if args.subcommand == "history":
        return run_history(service, args.limit)
    if args.subcommand == "resume":
        return run_resume(service)
    if args.subcommand == "stats":
        return run_stats(service, args.days)
    return 1


if __name__ == "__main__":
    sys.exit(main())
