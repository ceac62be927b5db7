"""Averages, completion status and target projection for a grade document."""
from grade_tracker.models import (
    Document, Semester, SemesterStatus, StatusClass, Validation,
)

WARNING_MARGIN = 5
UNLABELED = "UNLABELED"


def canonical_semester(semesters: list[Semester]) -> Semester | None:
    """The lowest-id semester, which owns the subject list."""
    if not semesters:
        return None
    return min(semesters, key=lambda s: s.id)


def semester_average(semester: Semester) -> float:
    # Unscored subjects count as 0 here.
    if not semester.subjects:
        return 0.0
    return sum(sub.score for sub in semester.subjects) / len(semester.subjects)


def overall_average(semesters: list[Semester]) -> float:
    """Mean of per-semester averages; every semester weighs the same."""
    if not semesters:
        return 0.0
    return sum(semester_average(s) for s in semesters) / len(semesters)


def semester_status(semester: Semester) -> SemesterStatus:
    if not semester.subjects:
        return SemesterStatus.EMPTY
    scored = sum(1 for sub in semester.subjects if sub.score > 0)
    if scored == 0:
        return SemesterStatus.EMPTY
    if scored < len(semester.subjects):
        return SemesterStatus.PARTIAL
    return SemesterStatus.COMPLETE


def complete_semesters(document: Document) -> list[Semester]:
    return [s for s in document.semesters if semester_status(s) == SemesterStatus.COMPLETE]


def validate(document: Document) -> Validation:
    return Validation(
        has_partial=any(semester_status(s) == SemesterStatus.PARTIAL for s in document.semesters),
        has_complete=len(complete_semesters(document)) > 0,
        is_valid_target=0 < document.target_avg <= 100,
        is_valid_sem_count=document.total_semesters_target > 0,
    )


def needed_average(document: Document) -> float:
    """Minimum average required in each remaining semester to hit the target.

    Returns 0 once no semesters remain, and never goes below 0 even when the
    target is already out of reach or comfortably exceeded.
    """
    complete = complete_semesters(document)
    remaining = document.total_semesters_target - len(complete)
    if remaining <= 0:
        return 0.0
    target_total = document.target_avg * document.total_semesters_target
    current_total = sum(semester_average(s) for s in complete)
    return max(0.0, (target_total - current_total) / remaining)


def total_score(document: Document) -> int:
    return sum(sub.score for s in complete_semesters(document) for sub in s.subjects)


def per_subject_averages(document: Document) -> list[dict]:
    """Cross-semester average for each canonical subject, ignoring unscored entries."""
    canonical = canonical_semester(document.semesters)
    if canonical is None:
        return []
    complete = complete_semesters(document)
    results = []
    for subject in canonical.subjects:
        scores = [
            sub.score
            for sem in complete
            for sub in sem.subjects
            if sub.id == subject.id and sub.score > 0
        ]
        results.append({
            "subject_id": subject.id,
            "name": subject.name,
            "average": sum(scores) / len(scores) if scores else 0.0,
            "count": len(scores),
        })
    return results


def status_class(value: float, target_avg: float) -> StatusClass:
    if value >= target_avg:
        return StatusClass.SAFE
    elif value >= target_avg - WARNING_MARGIN:
        return StatusClass.WARNING
    return StatusClass.DANGER


def status_color(status: StatusClass) -> str:
    if status == StatusClass.SAFE:
        return "green"
    elif status == StatusClass.WARNING:
        return "yellow"
    return "red"


def target_reached(document: Document) -> bool:
    return overall_average(complete_semesters(document)) >= document.target_avg


def summarize(document: Document) -> dict:
    complete = complete_semesters(document)
    overall = overall_average(complete)
    return {
        "user_name": document.user_name,
        "overall_avg": overall,
        "total_score": total_score(document),
        "needed_avg": needed_average(document),
        "target_avg": document.target_avg,
        "completed_semesters": [s.id for s in complete],
        "status_class": status_class(overall, document.target_avg),
        "target_reached": target_reached(document),
    }


def semester_report(document: Document) -> list[dict]:
    return [
        {
            "id": sem.id,
            "status": semester_status(sem),
            "average": semester_average(sem),
            "subjects": [(sub.name or UNLABELED, sub.score) for sub in sem.subjects],
        }
        for sem in document.semesters
    ]
