"""Instructor service: implements InstructorServicePort."""

import logging
from uuid import UUID

from .messages import InstructorMessages
from .models import (
    CreateInstructorRequest,
    Instructor,
    InstructorResponse,
    UpdateInstructorRequest,
)
from .ports import (
    InstructorRepositoryPort,
    InstructorRulesPort,
    InstructorServicePort,
    MapperPort,
    OrderBy,
    Predicate,
)

logger = logging.getLogger(__name__)


class InstructorService(InstructorServicePort):
    """Core implementation of InstructorServicePort.

    Same orchestration as EventService: rule check, mapping, a single
    repository call, mapping back to a response.
    """

    def __init__(
        self,
        repository: InstructorRepositoryPort,
        mapper: MapperPort,
        rules: InstructorRulesPort,
    ):
        self.repository = repository
        self.mapper = mapper
        self.rules = rules

    async def add(self, create_request: CreateInstructorRequest) -> InstructorResponse:
        """Create an instructor.

        Raises:
            ConflictError: If the name is already taken. Nothing is persisted.
        """
        await self.rules.instructor_name_must_be_unique(create_request.name)

        instructor = self.mapper.map(create_request, Instructor)
        added = await self.repository.add(instructor)

        logger.info(
            f"Instructor {added.id} created",
            extra={"instructor_id": str(added.id), "instructor_name": added.name},
        )

        return self.mapper.map(added, InstructorResponse)

    async def get_by_id(self, instructor_id: UUID) -> InstructorResponse:
        instructor = await self.rules.instructor_must_exist(instructor_id)

        logger.debug(
            f"Retrieved instructor {instructor_id}",
            extra={"instructor_id": str(instructor_id)},
        )

        return self.mapper.map(instructor, InstructorResponse)

    async def update(
        self, instructor_id: UUID, update_request: UpdateInstructorRequest
    ) -> InstructorResponse:
        instructor = await self.rules.instructor_must_exist(instructor_id)

        instructor = self.mapper.map_onto(update_request, instructor)
        updated = await self.repository.update(instructor)

        logger.info(
            f"Instructor {instructor_id} updated",
            extra={"instructor_id": str(instructor_id), "instructor_name": updated.name},
        )

        return self.mapper.map(updated, InstructorResponse)

    async def delete(self, instructor_id: UUID, permanent: bool = False) -> str:
        instructor = await self.rules.instructor_must_exist(instructor_id)

        await self.repository.delete(instructor, permanent)

        logger.info(
            f"Instructor {instructor_id} deleted",
            extra={"instructor_id": str(instructor_id), "permanent": permanent},
        )

        return InstructorMessages.INSTRUCTOR_DELETED

    async def get_list(
        self,
        predicate: Predicate | None = None,
        order_by: OrderBy | None = None,
        include: bool = False,
        with_deleted: bool = False,
        enable_tracking: bool = True,
    ) -> list[InstructorResponse]:
        instructors = await self.repository.get_list(
            predicate=predicate,
            order_by=order_by,
            include=include,
            with_deleted=with_deleted,
            enable_tracking=enable_tracking,
        )

        logger.debug("Listed instructors", extra={"count": len(instructors)})

        return [
            self.mapper.map(instructor, InstructorResponse)
            for instructor in instructors
        ]
