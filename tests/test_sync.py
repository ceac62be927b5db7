from dataclasses import replace

from grade_tracker.models import Document, Semester, Subject
from grade_tracker.sync import reconcile_subjects, resize_semesters, synchronize

from conftest import make_semester


def test_grow_copies_canonical_subjects_with_zero_scores():
    doc = Document(total_semesters_target=3, semesters=[make_semester(1, [80, 90], names=["Math", "Art"])])
    result = resize_semesters(doc)
    assert [s.id for s in result.semesters] == [1, 2, 3]
    for sem in result.semesters[1:]:
        assert [(sub.id, sub.name, sub.score) for sub in sem.subjects] == [("s1", "Math", 0), ("s2", "Art", 0)]
    # Input untouched
    assert len(doc.semesters) == 1


def test_grow_from_empty_list():
    result = resize_semesters(Document(total_semesters_target=2, semesters=[]))
    assert [s.id for s in result.semesters] == [1, 2]
    assert all(s.subjects == [] for s in result.semesters)


def test_shrink_keeps_leading_semesters_unchanged(three_subject_doc):
    three_subject_doc.total_semesters_target = 2
    result = resize_semesters(three_subject_doc)
    assert [s.id for s in result.semesters] == [1, 2]
    assert result.semesters == three_subject_doc.semesters[:2]


def test_shrink_to_zero_drops_everything(three_subject_doc):
    result = resize_semesters(replace(three_subject_doc, total_semesters_target=0))
    assert result.semesters == []


def test_negative_target_treated_as_zero(three_subject_doc):
    result = resize_semesters(replace(three_subject_doc, total_semesters_target=-3))
    assert result.semesters == []


def test_resize_is_idempotent():
    doc = Document(total_semesters_target=4, semesters=[make_semester(1, [50])])
    once = resize_semesters(doc)
    twice = resize_semesters(once)
    assert twice == once
    assert twice is once


def test_synchronize_resets_active_semester_when_out_of_range(three_subject_doc):
    doc = replace(three_subject_doc, total_semesters_target=3)
    result, active = synchronize(doc, 5)
    assert len(result.semesters) == 3
    assert active == 1


def test_synchronize_keeps_active_semester_in_range(three_subject_doc):
    _, active = synchronize(three_subject_doc, 4)
    assert active == 4


def test_synchronize_keeps_active_when_count_is_zero(three_subject_doc):
    _, active = synchronize(replace(three_subject_doc, total_semesters_target=0), 4)
    assert active == 4


def test_reconcile_aligns_siblings_to_canonical():
    doc = Document(semesters=[
        Semester(id=1, subjects=[Subject(id="a", name="Math", score=80), Subject(id="b", name="Art", score=70)]),
        Semester(id=2, subjects=[Subject(id="b", name="old", score=60), Subject(id="x", name="Gone", score=10)]),
    ])
    result = reconcile_subjects(doc)
    sibling = result.semesters[1]
    assert [(s.id, s.name, s.score) for s in sibling.subjects] == [("a", "Math", 0), ("b", "Art", 60)]
    assert result.semesters[0] == doc.semesters[0]


def test_reconcile_without_semesters():
    doc = Document(semesters=[])
    assert reconcile_subjects(doc) is doc
