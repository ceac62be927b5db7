import pytest

from grade_tracker.models import Document, Semester, Subject


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tracker.db")
    return db_path


def make_semester(sem_id, scores, names=None):
    """Semester whose subjects are s1, s2, ... with the given scores."""
    names = names or [f"Subject {i}" for i in range(1, len(scores) + 1)]
    return Semester(
        id=sem_id,
        subjects=[Subject(id=f"s{i}", name=n, score=sc) for i, (n, sc) in enumerate(zip(names, scores), 1)],
    )


@pytest.fixture
def three_subject_doc():
    """Two complete semesters followed by four unscored ones."""
    return Document(
        user_name="Rina",
        target_avg=85,
        total_semesters_target=6,
        semesters=[
            make_semester(1, [80, 90, 70]),
            make_semester(2, [90, 90, 90]),
            make_semester(3, [0, 0, 0]),
            make_semester(4, [0, 0, 0]),
            make_semester(5, [0, 0, 0]),
            make_semester(6, [0, 0, 0]),
        ],
    )
