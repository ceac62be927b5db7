"""State transitions on the grade document. Every operation returns a new document."""
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from grade_tracker.aggregation import summarize
from grade_tracker.models import (
    HISTORY_LIMIT, MAX_SCORE, MIN_SCORE, Document, HistoryEntry, Semester, Subject,
)
from grade_tracker.sync import reconcile_subjects


def new_subject_id() -> str:
    return uuid4().hex[:9]


def clamp_score(value: int) -> int:
    return min(MAX_SCORE, max(MIN_SCORE, value))


def parse_score(text: str) -> int:
    """Turn raw score input into a clamped integer; blank or junk means 0."""
    try:
        return clamp_score(int(text.strip()))
    except ValueError:
        return 0


def parse_target_avg(text: str) -> float:
    # Capped at 100 but not floored: a non-positive target is left for validation.
    try:
        return min(100.0, float(text.strip()))
    except ValueError:
        return 0.0


def parse_semester_count(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


def set_user_name(document: Document, name: str) -> Document:
    return replace(document, user_name=name)


def set_target_avg(document: Document, value: float) -> Document:
    return replace(document, target_avg=value)


def set_total_semesters(document: Document, value: int) -> Document:
    return replace(document, total_semesters_target=value)


def add_subject(document: Document, subject_id: str | None = None) -> Document:
    """Append one blank subject, with the same id, to every semester."""
    subject_id = subject_id or new_subject_id()
    semesters = [
        Semester(id=s.id, subjects=list(s.subjects) + [Subject(id=subject_id)])
        for s in document.semesters
    ]
    return reconcile_subjects(replace(document, semesters=semesters))


def update_subject(
    document: Document,
    subject_id: str,
    field: str,
    value: str | int,
    active_semester_id: int,
) -> Document:
    """Rename a subject everywhere, or set its score in the active semester only.

    Scores must already be clamped (see ``parse_score``).
    """
    if field not in ("name", "score"):
        raise ValueError(f"Unknown subject field: {field}")
    semesters = []
    for sem in document.semesters:
        if field == "name" or sem.id == active_semester_id:
            sem = Semester(
                id=sem.id,
                subjects=[
                    replace(sub, **{field: value}) if sub.id == subject_id else sub
                    for sub in sem.subjects
                ],
            )
        semesters.append(sem)
    return replace(document, semesters=semesters)


def delete_subject(document: Document, subject_id: str) -> Document:
    semesters = [
        Semester(id=s.id, subjects=[sub for sub in s.subjects if sub.id != subject_id])
        for s in document.semesters
    ]
    return reconcile_subjects(replace(document, semesters=semesters))


def record_history(
    document: Document,
    entry_id: str | None = None,
    timestamp: str | None = None,
) -> Document:
    """Prepend a snapshot of the current analysis, keeping the newest entries."""
    summary = summarize(document)
    entry = HistoryEntry(
        id=entry_id or uuid4().hex,
        timestamp=timestamp or datetime.now().isoformat(),
        user_name=summary["user_name"],
        overall_avg=summary["overall_avg"],
        total_score=summary["total_score"],
        target_avg=summary["target_avg"],
        completed_semesters=summary["completed_semesters"],
    )
    return replace(document, history=([entry] + list(document.history))[:HISTORY_LIMIT])


def delete_history_entry(document: Document, entry_id: str) -> Document:
    return replace(document, history=[h for h in document.history if h.id != entry_id])
