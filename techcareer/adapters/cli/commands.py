"""CLI command implementations for TechCareer management.

This adapter maps CLI commands (add, get, update, delete, list) to the
EventServicePort and InstructorServicePort operations. It handles
CLI-specific argument parsing, formatting and error reporting.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable
from operator import attrgetter
from typing import Any
from uuid import UUID

from techcareer.core.errors import BusinessError
from techcareer.core.models import (
    Category,
    CreateEventRequest,
    CreateInstructorRequest,
    UpdateEventRequest,
    UpdateInstructorRequest,
)
from techcareer.core.ports import (
    CategoryRepositoryPort,
    EventServicePort,
    InstructorServicePort,
)

logger = logging.getLogger(__name__)

EVENT_SORT_FIELDS = frozenset({"title", "category_id", "created_at"})
INSTRUCTOR_SORT_FIELDS = frozenset({"name", "created_at"})


def _to_dict(response: Any) -> dict[str, Any]:
    data = dataclasses.asdict(response)
    data["id"] = str(data["id"])
    return data


def _build_predicate(
    search: str | None, field_name: str
) -> Callable[[Any], bool] | None:
    """Case-insensitive substring match on ``field_name``."""
    if not search:
        return None
    needle = search.casefold()
    return lambda entity: needle in getattr(entity, field_name).casefold()


def _build_order_by(
    field_name: str | None, allowed: frozenset[str], descending: bool
) -> Callable[[Iterable[Any]], list[Any]] | None:
    if field_name is None:
        return None
    if field_name not in allowed:
        raise ValueError(
            f"Cannot sort by {field_name!r}; choose one of {sorted(allowed)}"
        )
    key = attrgetter(field_name)
    # None timestamps sort first
    return lambda entities: sorted(
        entities,
        key=lambda entity: (key(entity) is not None, key(entity)),
        reverse=descending,
    )


class CLICommandHandler:
    """Handles CLI commands by delegating to the service ports.

    Business rule violations and malformed arguments are reported as
    ``{"status": "error"}`` results; any other failure propagates.
    """

    def __init__(
        self,
        events: EventServicePort,
        instructors: InstructorServicePort,
        categories: CategoryRepositoryPort,
    ):
        """Initialize the CLI command handler.

        Args:
            events: EventServicePort implementation.
            instructors: InstructorServicePort implementation.
            categories: CategoryRepositoryPort used to manage event categories.
        """
        self.events = events
        self.instructors = instructors
        self.categories = categories

    async def _run(
        self, operation: str, action: Callable[[], Any], **context: Any
    ) -> dict[str, Any]:
        try:
            result = await action()
        except (BusinessError, ValueError) as e:
            logger.error(f"Failed to {operation}: {e}")
            return {"status": "error", "operation": operation, **context, "message": str(e)}
        return {"status": "success", "operation": operation, **context, **result}

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def add_category(self, args: dict[str, Any]) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            category = Category(
                id=int(_required(args, "id")), name=_required(args, "name")
            )
            await self.categories.add(category)
            return {"data": dataclasses.asdict(category)}

        return await self._run("add_category", action)

    async def list_categories(self) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            categories = await self.categories.get_list(enable_tracking=False)
            return {
                "count": len(categories),
                "data": [dataclasses.asdict(c) for c in categories],
            }

        return await self._run("list_categories", action)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def add_event(self, args: dict[str, Any]) -> dict[str, Any]:
        """Create an event from ``title``, ``description``, ``image_url``,
        ``participation_text`` and ``category_id``."""

        async def action() -> dict[str, Any]:
            request = CreateEventRequest(
                title=_required(args, "title"),
                description=args.get("description", ""),
                image_url=args.get("image_url", ""),
                participation_text=args.get("participation_text", ""),
                category_id=int(_required(args, "category_id")),
            )
            return {"data": _to_dict(await self.events.add(request))}

        return await self._run("add_event", action)

    async def get_event(self, event_id: str) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            return {"data": _to_dict(await self.events.get_by_id(UUID(event_id)))}

        return await self._run("get_event", action, event_id=event_id)

    async def update_event(self, event_id: str, args: dict[str, Any]) -> dict[str, Any]:
        """Update an event; only the supplied fields change."""

        async def action() -> dict[str, Any]:
            target = UUID(event_id)
            category_id = args.get("category_id")
            request = UpdateEventRequest(
                id=target,
                title=args.get("title"),
                description=args.get("description"),
                image_url=args.get("image_url"),
                participation_text=args.get("participation_text"),
                category_id=int(category_id) if category_id is not None else None,
            )
            return {"data": _to_dict(await self.events.update(target, request))}

        return await self._run("update_event", action, event_id=event_id)

    async def delete_event(self, event_id: str, permanent: bool = False) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            message = await self.events.delete(UUID(event_id), permanent)
            return {"message": message}

        return await self._run("delete_event", action, event_id=event_id)

    async def list_events(self, args: dict[str, Any]) -> dict[str, Any]:
        """List events.

        Args:
            args: Optional ``search`` (title substring), ``order_by``
                (field name), ``descending``, ``include`` and ``with_deleted``.
        """

        async def action() -> dict[str, Any]:
            responses = await self.events.get_list(
                predicate=_build_predicate(args.get("search"), "title"),
                order_by=_build_order_by(
                    args.get("order_by"),
                    EVENT_SORT_FIELDS,
                    _flag(args, "descending"),
                ),
                include=_flag(args, "include"),
                with_deleted=_flag(args, "with_deleted"),
            )
            return {"count": len(responses), "data": [_to_dict(r) for r in responses]}

        return await self._run("list_events", action)

    # ------------------------------------------------------------------
    # Instructors
    # ------------------------------------------------------------------

    async def add_instructor(self, args: dict[str, Any]) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            request = CreateInstructorRequest(
                name=_required(args, "name"),
                about=args.get("about", ""),
            )
            return {"data": _to_dict(await self.instructors.add(request))}

        return await self._run("add_instructor", action)

    async def get_instructor(self, instructor_id: str) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            response = await self.instructors.get_by_id(UUID(instructor_id))
            return {"data": _to_dict(response)}

        return await self._run("get_instructor", action, instructor_id=instructor_id)

    async def update_instructor(
        self, instructor_id: str, args: dict[str, Any]
    ) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            target = UUID(instructor_id)
            request = UpdateInstructorRequest(
                id=target,
                name=args.get("name"),
                about=args.get("about"),
            )
            return {"data": _to_dict(await self.instructors.update(target, request))}

        return await self._run("update_instructor", action, instructor_id=instructor_id)

    async def delete_instructor(
        self, instructor_id: str, permanent: bool = False
    ) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            message = await self.instructors.delete(UUID(instructor_id), permanent)
            return {"message": message}

        return await self._run("delete_instructor", action, instructor_id=instructor_id)

    async def list_instructors(self, args: dict[str, Any]) -> dict[str, Any]:
        async def action() -> dict[str, Any]:
            responses = await self.instructors.get_list(
                predicate=_build_predicate(args.get("search"), "name"),
                order_by=_build_order_by(
                    args.get("order_by"),
                    INSTRUCTOR_SORT_FIELDS,
                    _flag(args, "descending"),
                ),
                with_deleted=_flag(args, "with_deleted"),
            )
            return {"count": len(responses), "data": [_to_dict(r) for r in responses]}

        return await self._run("list_instructors", action)


def _required(args: dict[str, Any], name: str) -> Any:
    if args.get(name) is None:
        raise ValueError(f"Missing required parameter: {name}")
    return args[name]


def _flag(args: dict[str, Any], name: str) -> bool:
    """Optional boolean argument; must be a JSON true/false when given."""
    value = args.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"Parameter {name} must be true or false, got {value!r}")
    return value


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Maps command names to handler methods.

    Args:
        handler: CLICommandHandler instance.
        command: Command name (e.g. 'add-event', 'list-instructors').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized.
    """
    if command == "add-category":
        return await handler.add_category(args)
    elif command == "list-categories":
        return await handler.list_categories()
    elif command == "add-event":
        return await handler.add_event(args)
    elif command == "get-event":
        return await handler.get_event(_required(args, "id"))
    elif command == "update-event":
        return await handler.update_event(_required(args, "id"), args)
    elif command == "delete-event":
        return await handler.delete_event(
            _required(args, "id"), _flag(args, "permanent")
        )
    elif command == "list-events":
        return await handler.list_events(args)
    elif command == "add-instructor":
        return await handler.add_instructor(args)
    elif command == "get-instructor":
        return await handler.get_instructor(_required(args, "id"))
    elif command == "update-instructor":
        return await handler.update_instructor(_required(args, "id"), args)
    elif command == "delete-instructor":
        return await handler.delete_instructor(
            _required(args, "id"), _flag(args, "permanent")
        )
    elif command == "list-instructors":
        return await handler.list_instructors(args)
    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
