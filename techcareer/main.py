"""Composition root for the TechCareer service tier.

Only this module knows both the core services and the concrete adapters.
It reads settings, builds the SQLite repositories, the mapper, the business
rules and the services on top of them, and then hands control to the
interactive command loop.
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any

from techcareer.adapters.cli.commands import CLICommandHandler, run_command
from techcareer.adapters.mapping.profile_mapper import build_default_mapper
from techcareer.adapters.store.sqlite import (
    SQLiteCategoryRepository,
    SQLiteDatabase,
    SQLiteEventRepository,
    SQLiteInstructorRepository,
)
from techcareer.config import Settings, load_settings
from techcareer.core.event_service import EventService
from techcareer.core.instructor_service import InstructorService
from techcareer.core.rules import EventBusinessRules, InstructorBusinessRules

logger = logging.getLogger(__name__)

PROMPT = "techcareer> "


@dataclass
class Application:
    """Wired services plus the database they share."""

    database: SQLiteDatabase
    categories: SQLiteCategoryRepository
    events: EventService
    instructors: InstructorService


def build_application(settings: Settings) -> Application:
    """Instantiate adapters and core services from settings."""
    database = SQLiteDatabase(
        db_path=settings.store_sqlite_path,
        pool_size=settings.store_pool_size,
    )
    mapper = build_default_mapper()

    event_repository = SQLiteEventRepository(database)
    instructor_repository = SQLiteInstructorRepository(database)

    return Application(
        database=database,
        categories=SQLiteCategoryRepository(database),
        events=EventService(
            repository=event_repository,
            mapper=mapper,
            rules=EventBusinessRules(event_repository),
        ),
        instructors=InstructorService(
            repository=instructor_repository,
            mapper=mapper,
            rules=InstructorBusinessRules(instructor_repository),
        ),
    )


def _parse_command_line(line: str) -> tuple[str, dict[str, Any]]:
    """Split ``command {json}`` into the command name and its arguments.

    Raises:
        ValueError: If the arguments are not a JSON object.
    """
    command, _, raw_args = line.partition(" ")
    raw_args = raw_args.strip()
    if not raw_args:
        return command.lower(), {}

    try:
        args = json.loads(raw_args)
    except json.JSONDecodeError as e:
        raise ValueError(f"Arguments are not valid JSON: {e.msg}") from e
    if not isinstance(args, dict):
        raise ValueError("Arguments must be a JSON object")
    return command.lower(), args


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Read commands from stdin and print each result as JSON.

    Runs until ``exit`` or end of input. Ctrl+C abandons the current line
    only.
    """
    logger.info("Interactive CLI ready; 'help' lists commands, 'exit' quits")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # input() blocks, so it runs on the default executor
            line = (await loop.run_in_executor(None, input, PROMPT)).strip()
        except EOFError:
            logger.info("End of input, leaving CLI")
            break
        except KeyboardInterrupt:
            logger.info("Input interrupted")
            continue

        if not line:
            continue
        if line.lower() == "exit":
            logger.info("Leaving CLI")
            break
        if line.lower() == "help":
            _print_cli_help()
            continue

        try:
            command, args = _parse_command_line(line)
        except ValueError as e:
            logger.error(f"{e}. Type 'help' for command syntax.")
            continue

        try:
            result = await run_command(cli_handler, command, args)
        except Exception as e:
            logger.error(f"Command {command!r} failed: {e}", exc_info=True)
            result = {"status": "error", "message": str(e)}
        print(json.dumps(result, indent=2, default=str))


def _print_cli_help() -> None:
    print(
        """
Available Commands (arguments are one JSON object after the command name):

  add-category {"id": 1, "name": "Conferences"}
  list-categories

  add-event {"title": "PyCon Meetup", "category_id": 1}
    optional: description, image_url, participation_text
  get-event {"id": "<uuid>"}
  update-event {"id": "<uuid>", "title": "New title"}
    any of: title, description, image_url, participation_text, category_id
  delete-event {"id": "<uuid>"}
    optional: permanent (default false keeps a soft-deleted record)
  list-events {"search": "py", "order_by": "title", "include": true}
    optional: search, order_by, descending, include, with_deleted

  add-instructor {"name": "Ada Lovelace", "about": "..."}
  get-instructor {"id": "<uuid>"}
  update-instructor {"id": "<uuid>", "about": "..."}
  delete-instructor {"id": "<uuid>", "permanent": false}
  list-instructors {"order_by": "name"}

  help    show this text
  exit    leave the CLI
"""
    )


def configure_logging(log_level: str, log_format: str) -> None:
    """Send log records to stdout.

    Args:
        log_level: Name of a ``logging`` level; unknown names mean INFO.
        log_format: ``json`` for one JSON object per line, else plain text.
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = (
            '{"time": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "message": "%(message)s"}'
        )
    else:
        format_str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


async def bootstrap() -> None:
    """Wire the application and run the CLI until it exits.

    The database connections are closed however the CLI ends.
    """
    settings = load_settings()
    configure_logging(settings.effective_log_level, settings.log_format)

    app = build_application(settings)
    logger.info(f"Using SQLite database at {settings.store_sqlite_path}")

    try:
        cli_handler = CLICommandHandler(app.events, app.instructors, app.categories)
        await _run_cli_interactive(cli_handler)
    finally:
        await app.database.close()


def main() -> None:
    """Console entry point.

    Exit codes:
        0: CLI exited normally
        1: Unhandled error during startup or a command
        130: Interrupted (SIGINT)
    """
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Interrupted, shutting down")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
