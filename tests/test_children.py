"""Child grouping helpers and cleanup jobs."""

from aiaio_core import children


def test_group_by_initial_sorted_and_skips_blank_names():
    rows = [{"name": "zoe"}, {"name": "Ava"}, {"name": "  "}, {"name": None}, {"name": "adam"}]
    groups = children.group_by_initial(rows)
    assert list(groups) == ["A", "Z"]
    assert [c["name"] for c in groups["A"]] == ["Ava", "adam"]


def test_children_starting_with_is_case_insensitive():
    rows = [{"name": "Ava"}, {"name": "ben"}, {"name": "adam"}]
    assert [c["name"] for c in children.children_starting_with(rows, "A")] == ["Ava", "adam"]


def test_find_duplicate_children_keeps_oldest():
    rows = [
        {"id": "new", "name": "Ava", "parent_id": "p1", "created_at": "2024-03-01"},
        {"id": "old", "name": "Ava", "parent_id": "p1", "created_at": "2024-01-01"},
        {"id": "other-parent", "name": "Ava", "parent_id": "p2", "created_at": "2024-02-01"},
        {"id": "tie-a", "name": "Ben", "parent_id": "p1", "created_at": "2024-01-01"},
        {"id": "tie-b", "name": "Ben", "parent_id": "p1", "created_at": "2024-01-01"},
    ]
    assert sorted(children.find_duplicate_children(rows)) == ["new", "tie-b"]


def test_find_orphaned_children():
    rows = [{"id": "c1", "parent_id": "u1"}, {"id": "c2", "parent_id": "gone"}, {"id": "c3", "parent_id": None}]
    assert [c["id"] for c in children.find_orphaned_children(rows, ["u1"])] == ["c2", "c3"]


def test_match_videos_to_children():
    rows = [{"id": "c1", "name": "Ava"}]
    videos = [{"child_name": "ava"}, {"child_name": "Ava"}, {"child_name": "Nobody"}]
    matches = {m.child_name: m for m in children.match_videos_to_children(rows, videos)}

    assert matches["ava"].matched and matches["ava"].child["id"] == "c1"
    assert len(matches["Ava"].videos) == 1
    assert not matches["Nobody"].matched


def test_cleanup_duplicate_children(db):
    db.tables = {
        "children": [
            {"id": "keep", "name": "Ava", "parent_id": "p1", "created_at": "2024-01-01"},
            {"id": "drop", "name": "Ava", "parent_id": "p1", "created_at": "2024-02-01"},
        ]
    }
    assert children.cleanup_duplicate_children(db, dry_run=True) == ["drop"]
    assert len(db.rows("children")) == 2

    assert children.cleanup_duplicate_children(db) == ["drop"]
    assert [c["id"] for c in db.rows("children")] == ["keep"]


def test_cleanup_orphaned_children(db):
    db.tables = {
        "users": [{"id": "u1"}],
        "children": [
            {"id": "c1", "name": "Ava", "parent_id": "u1"},
            {"id": "c2", "name": "Ben", "parent_id": "deleted-user"},
        ],
    }
    assert children.cleanup_orphaned_children(db) == ["c2"]
    assert [c["id"] for c in db.rows("children")] == ["c1"]


def test_cleanup_with_nothing_to_delete_issues_no_delete(db):
    db.tables = {"users": [{"id": "u1"}], "children": [{"id": "c1", "name": "Ava", "parent_id": "u1"}]}
    assert children.cleanup_orphaned_children(db) == []
    assert not [call for call in db.calls if call[1] == "delete"]
