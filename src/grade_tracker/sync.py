"""Keep the semester list and sibling subject lists in line with the canonical semester."""
import logging
from dataclasses import replace

from grade_tracker.aggregation import canonical_semester
from grade_tracker.models import CANONICAL_SEMESTER_ID, Document, Semester, Subject

logger = logging.getLogger(__name__)


def resize_semesters(document: Document) -> Document:
    """Grow or truncate ``semesters`` to match ``total_semesters_target``.

    New semesters copy the canonical subject list with every score reset to 0.
    Truncation always drops from the tail. At the fixed point the same
    document is returned untouched.
    """
    target = max(0, document.total_semesters_target)
    current = len(document.semesters)
    if current < target:
        canonical = canonical_semester(document.semesters)
        template = canonical.subjects if canonical else []
        added = [
            Semester(
                id=current + i + 1,
                subjects=[Subject(id=s.id, name=s.name, score=0) for s in template],
            )
            for i in range(target - current)
        ]
        logger.debug("Adding %d semester(s) to reach %d", len(added), target)
        return replace(document, semesters=list(document.semesters) + added)
    elif current > target:
        logger.debug("Truncating semesters from %d to %d", current, target)
        return replace(document, semesters=list(document.semesters[:target]))
    return document


def synchronize(document: Document, active_semester_id: int) -> tuple[Document, int]:
    """Apply the resize rule and fix up the active semester selection."""
    document = resize_semesters(document)
    target = document.total_semesters_target
    if active_semester_id > target and target > 0:
        active_semester_id = CANONICAL_SEMESTER_ID
    return document, active_semester_id


def reconcile_subjects(document: Document) -> Document:
    """Rebuild every sibling semester's subject list from the canonical one.

    Ids and names (and their order) come from the canonical semester; scores
    are kept per semester, and subjects missing from a sibling start at 0.
    """
    canonical = canonical_semester(document.semesters)
    if canonical is None:
        return document
    semesters = []
    for sem in document.semesters:
        if sem is canonical:
            semesters.append(sem)
            continue
        scores = {sub.id: sub.score for sub in sem.subjects}
        semesters.append(Semester(
            id=sem.id,
            subjects=[
                Subject(id=c.id, name=c.name, score=scores.get(c.id, 0))
                for c in canonical.subjects
            ],
        ))
    return replace(document, semesters=semesters)
