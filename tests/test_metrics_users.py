from tutorium.metrics_users import compute_user_composition, user_composition
from tutorium.records import users_frame


def test_user_composition_splits_on_truthy_teacher_id():
    users = users_frame([{"teacher_id": 1}, {"teacher_id": None}, {"teacher_id": ""}, {"teacher_id": "T-2"}, {}])
    counts = user_composition(users)
    assert counts == {"teacher": 2, "non_teacher": 3}
    assert list(counts) == ["teacher", "non_teacher"]


def test_compute_user_composition_segments_are_ordered():
    payload = compute_user_composition({"users": users_frame([{"teacher_id": 1}, {}, {}, {}])})
    assert payload["total"] == 4
    assert [s["label"] for s in payload["segments"]] == ["Teacher", "Learner"]
    assert payload["segments"][0]["share"] == 0.25
    assert payload["chart"] is not None


def test_compute_user_composition_without_users():
    payload = compute_user_composition({"users": users_frame([])})
    assert payload["counts"] == {"teacher": 0, "non_teacher": 0}
    assert payload["chart"] is None
    assert payload["segments"][0]["share"] is None
