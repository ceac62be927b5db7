"""Load and save the grade document as JSON in SQLite."""
import json
import logging
from datetime import datetime

from grade_tracker.db import get_connection
from grade_tracker.models import (
    DEFAULT_TARGET_AVG, DEFAULT_TOTAL_SEMESTERS, Document, HistoryEntry, Semester, Subject,
)
from grade_tracker.mutations import clamp_score

# Bump the suffix when the payload shape changes incompatibly.
STORAGE_KEY = "grade_tracker_v1"

logger = logging.getLogger(__name__)


def document_to_dict(document: Document) -> dict:
    return {
        "userName": document.user_name,
        "targetAvg": document.target_avg,
        "totalSemestersTarget": document.total_semesters_target,
        "semesters": [
            {
                "id": sem.id,
                "subjects": [
                    {"id": sub.id, "name": sub.name, "score": sub.score}
                    for sub in sem.subjects
                ],
            }
            for sem in document.semesters
        ],
        "history": [
            {
                "id": h.id,
                "timestamp": h.timestamp,
                "userName": h.user_name,
                "overallAvg": h.overall_avg,
                "totalScore": h.total_score,
                "targetAvg": h.target_avg,
                "completedSemesters": list(h.completed_semesters),
            }
            for h in document.history
        ],
    }


def document_from_dict(data: dict) -> Document:
    """Build a document from stored data; missing or empty fields take defaults."""
    return Document(
        user_name=data.get("userName") or "",
        target_avg=float(data.get("targetAvg") or DEFAULT_TARGET_AVG),
        total_semesters_target=int(data.get("totalSemestersTarget") or DEFAULT_TOTAL_SEMESTERS),
        semesters=[
            Semester(
                id=int(sem["id"]),
                subjects=[
                    Subject(
                        id=str(sub["id"]),
                        name=sub.get("name") or "",
                        score=clamp_score(int(sub.get("score") or 0)),
                    )
                    for sub in sem.get("subjects") or []
                ],
            )
            for sem in data.get("semesters") or []
        ],
        history=[
            HistoryEntry(
                id=str(h["id"]),
                timestamp=h.get("timestamp") or "",
                user_name=h.get("userName") or "",
                overall_avg=float(h.get("overallAvg") or 0.0),
                total_score=int(h.get("totalScore") or 0),
                target_avg=float(h.get("targetAvg") or 0),
                completed_semesters=list(h.get("completedSemesters") or []),
            )
            for h in data.get("history") or []
        ],
    )


def load_document(db_path: str) -> Document | None:
    """Return the saved document, or None when nothing usable is stored."""
    conn = get_connection(db_path)
    row = conn.execute("SELECT payload FROM documents WHERE key = ?", (STORAGE_KEY,)).fetchone()
    conn.close()
    if not row or not row["payload"]:
        return None
    try:
        return document_from_dict(json.loads(row["payload"]))
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Ignoring unreadable saved document: %s", e)
        return None


def save_document(db_path: str, document: Document) -> None:
    payload = json.dumps(document_to_dict(document))
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO documents (key, payload, updated_at) VALUES (?, ?, ?) "
        "ON CONFLICT(key) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at",
        (STORAGE_KEY, payload, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
