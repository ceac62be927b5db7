"""Holds the live document for one user session and persists every change."""
import logging
import time

from grade_tracker import aggregation, mutations
from grade_tracker.db import init_db
from grade_tracker.models import CANONICAL_SEMESTER_ID, Document, Semester, default_document
from grade_tracker.store import load_document, save_document
from grade_tracker.sync import synchronize

ANALYSIS_DELAY_SECONDS = 1.8

logger = logging.getLogger(__name__)


class TrackerSession:
    """Single-writer state container around a grade document.

    Mutations go through the pure functions in ``mutations``; the session swaps
    in the returned document, hides any shown results and saves.
    """

    def __init__(self, db_path: str, document: Document, active_semester_id: int = CANONICAL_SEMESTER_ID):
        self.db_path = db_path
        self.document = document
        self.active_semester_id = active_semester_id
        self.results_visible = False
        self._sync()

    @classmethod
    def open(cls, db_path: str) -> "TrackerSession":
        init_db(db_path)
        document = load_document(db_path)
        if document is None:
            logger.info("No saved document in %s, starting fresh", db_path)
            document = default_document()
        return cls(db_path, document)

    @property
    def needs_profile(self) -> bool:
        return not self.document.user_name

    @property
    def active_semester(self) -> Semester | None:
        for sem in self.document.semesters:
            if sem.id == self.active_semester_id:
                return sem
        return None

    @property
    def is_canonical_active(self) -> bool:
        return self.active_semester_id == CANONICAL_SEMESTER_ID

    def _sync(self) -> None:
        document, self.active_semester_id = synchronize(self.document, self.active_semester_id)
        self._commit(document)

    def _commit(self, document: Document) -> None:
        self.document = document
        save_document(self.db_path, document)

    def _apply(self, document: Document) -> None:
        self.results_visible = False
        self._commit(document)

    def select_semester(self, semester_id: int) -> bool:
        if not any(s.id == semester_id for s in self.document.semesters):
            return False
        self.active_semester_id = semester_id
        return True

    def set_user_name(self, name: str) -> None:
        self._apply(mutations.set_user_name(self.document, name))

    def set_target_avg(self, value: float) -> None:
        self._apply(mutations.set_target_avg(self.document, value))

    def set_total_semesters(self, value: int) -> None:
        self._apply(mutations.set_total_semesters(self.document, value))
        self._sync()

    def add_subject(self) -> str:
        subject_id = mutations.new_subject_id()
        self._apply(mutations.add_subject(self.document, subject_id))
        return subject_id

    def rename_subject(self, subject_id: str, name: str) -> bool:
        # Names are edited from the canonical semester only.
        if not self.is_canonical_active:
            return False
        self._apply(mutations.update_subject(
            self.document, subject_id, "name", name, self.active_semester_id,
        ))
        return True

    def set_score(self, subject_id: str, score: int) -> None:
        self._apply(mutations.update_subject(
            self.document, subject_id, "score", mutations.clamp_score(score), self.active_semester_id,
        ))

    def delete_subject(self, subject_id: str) -> None:
        self._apply(mutations.delete_subject(self.document, subject_id))

    def delete_history_entry(self, entry_id: str) -> None:
        self._apply(mutations.delete_history_entry(self.document, entry_id))

    def analyze(self, delay: float = ANALYSIS_DELAY_SECONDS) -> dict | None:
        """Run the analysis if the data allows it, logging a history snapshot.

        Returns the summary, or None when validation blocks the calculation.
        """
        if not aggregation.validate(self.document).can_calculate:
            return None
        if delay > 0:
            time.sleep(delay)
        summary = aggregation.summarize(self.document)
        self._commit(mutations.record_history(self.document))
        self.results_visible = True
        return summary
