# tests/test_integration.py
"""End-to-end test of the core workflow."""
from grade_tracker.aggregation import (
    complete_semesters, needed_average, overall_average, per_subject_averages, total_score,
    validate,
)
from grade_tracker.session import TrackerSession
from grade_tracker.store import load_document


def test_full_tracking_workflow(tmp_db):
    """Set up a profile, fill two semesters, analyze and reopen."""
    session = TrackerSession.open(tmp_db)
    session.set_user_name("Rina")
    session.set_target_avg(85)
    session.set_total_semesters(4)

    ids = []
    for name in ["Math", "Physics", "History"]:
        subject_id = session.add_subject()
        session.rename_subject(subject_id, name)
        ids.append(subject_id)

    for sem_id, scores in [(1, [80, 85, 90]), (2, [90, 88, 86])]:
        session.select_semester(sem_id)
        for subject_id, score in zip(ids, scores):
            session.set_score(subject_id, score)

    doc = session.document
    assert [s.id for s in complete_semesters(doc)] == [1, 2]
    assert overall_average(complete_semesters(doc)) == 86.5
    assert total_score(doc) == 519
    # (85 * 4 - (85 + 88)) / 2
    assert needed_average(doc) == 83.5
    assert [row["average"] for row in per_subject_averages(doc)] == [85, 86.5, 88]

    # A half-filled third semester blocks the analysis
    session.select_semester(3)
    session.set_score(ids[0], 70)
    assert validate(session.document).has_partial is True
    assert session.analyze(delay=0) is None
    session.set_score(ids[0], 0)

    summary = session.analyze(delay=0)
    assert summary["needed_avg"] == 83.5
    assert summary["target_reached"] is True

    # Removing a subject and shrinking the plan survive a reload
    session.delete_subject(ids[2])
    session.set_total_semesters(2)
    reopened = TrackerSession.open(tmp_db)
    assert reopened.document == load_document(tmp_db)
    assert len(reopened.document.semesters) == 2
    assert [s.name for s in reopened.document.semesters[1].subjects] == ["Math", "Physics"]
    assert len(reopened.document.history) == 1
