"""Data classes for the grade tracker document."""
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_TARGET_AVG = 85
DEFAULT_TOTAL_SEMESTERS = 6
HISTORY_LIMIT = 10
MIN_SCORE = 0
MAX_SCORE = 100
CANONICAL_SEMESTER_ID = 1


class SemesterStatus(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"


class StatusClass(str, Enum):
    SAFE = "SAFE"
    WARNING = "WARNING"
    DANGER = "DANGER"


@dataclass
class Subject:
    id: str
    name: str = ""
    score: int = 0  # 0 doubles as "not scored yet"


@dataclass
class Semester:
    id: int
    subjects: list[Subject] = field(default_factory=list)


@dataclass
class HistoryEntry:
    id: str
    timestamp: str
    user_name: str
    overall_avg: float
    total_score: int
    target_avg: float
    completed_semesters: list[int] = field(default_factory=list)


@dataclass
class Document:
    user_name: str = ""
    target_avg: float = DEFAULT_TARGET_AVG
    total_semesters_target: int = DEFAULT_TOTAL_SEMESTERS
    semesters: list[Semester] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)


@dataclass
class Validation:
    has_partial: bool
    has_complete: bool
    is_valid_target: bool
    is_valid_sem_count: bool

    @property
    def can_calculate(self) -> bool:
        return (
            not self.has_partial
            and self.has_complete
            and self.is_valid_target
            and self.is_valid_sem_count
        )


def default_document() -> Document:
    """First-run document: empty profile and six empty semesters."""
    return Document(
        semesters=[Semester(id=i + 1) for i in range(DEFAULT_TOTAL_SEMESTERS)],
    )
