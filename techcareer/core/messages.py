"""User-facing messages returned or raised by the services."""


class EventMessages:
    EVENT_DELETED = "Event deleted."
    EVENT_NOT_FOUND = "Event not found."
    EVENT_TITLE_MUST_BE_UNIQUE = "Title must be unique for every event."


class InstructorMessages:
    INSTRUCTOR_DELETED = "Instructor deleted."
    INSTRUCTOR_NOT_FOUND = "Instructor not found."
    INSTRUCTOR_NAME_MUST_BE_UNIQUE = "Name must be unique for every instructor."
