from enum import Enum


class RelationshipType(str, Enum):
    """Rater's structural relation to the evaluated user. Order is report order."""
    SELF = "self"
    MANAGER = "manager"
    PEER = "peer"
    DIRECT_REPORT = "direct_report"

    @property
    def label(self) -> str:
        return _RELATIONSHIP_LABELS[self]


_RELATIONSHIP_LABELS = {
    RelationshipType.SELF: "Self",
    RelationshipType.MANAGER: "Manager",
    RelationshipType.PEER: "Peer",
    RelationshipType.DIRECT_REPORT: "Direct Report",
}


class ResponseStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CycleStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


class ParticipantStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuestionKind(str, Enum):
    RATING = "rating"
    TEXT = "text"


def sql_in(enum_cls) -> str:
    """Render enum values for a CHECK constraint: 'a','b','c'"""
    return ",".join(f"'{m.value}'" for m in enum_cls)


class ClassificationOutcome(str, Enum):
    DEVELOPMENT_AREAS = "development_areas"
    NO_DEVELOPMENT_AREAS = "no_development_areas"
