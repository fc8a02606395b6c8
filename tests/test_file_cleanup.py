from datetime import datetime, timedelta, timezone

import pytest

from opsdesk.maintenance import file_cleanup

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _seed(db, public_dir):
    uploads = public_dir / "uploads"
    uploads.mkdir(parents=True)
    (uploads / "old.pdf").write_bytes(b"x" * 2048)
    (uploads / "recent.pdf").write_bytes(b"x" * 1024)
    return db.seed(
        "filestorages",
        [
            {"originalName": "old.pdf", "filePath": "/uploads/old.pdf", "size": 2048, "isOrphaned": True, "createdAt": NOW - timedelta(days=10)},
            {"originalName": "recent.pdf", "filePath": "/uploads/recent.pdf", "size": 1024, "isOrphaned": True, "createdAt": NOW - timedelta(days=2)},
            {"originalName": "gone.pdf", "filePath": "/uploads/gone.pdf", "size": 10, "isOrphaned": True, "createdAt": NOW - timedelta(days=30)},
            {"originalName": "kept.pdf", "filePath": "/uploads/kept.pdf", "size": 10, "isOrphaned": False, "createdAt": NOW - timedelta(days=30)},
        ],
    )


def test_deletes_old_orphans_and_their_files(db, tmp_path, capsys):
    public = tmp_path / "public"
    ids = _seed(db, public)

    deleted, errors = file_cleanup.cleanup_orphaned_files(db, public, older_than_days=7, now=NOW)

    assert (deleted, errors) == (2, 0)
    assert not (public / "uploads" / "old.pdf").exists()
    assert (public / "uploads" / "recent.pdf").exists()
    remaining = {d["_id"] for d in db["filestorages"].find({})}
    assert remaining == {ids[1], ids[3]}
    assert "physical file not found" in capsys.readouterr().out


def test_dry_run_changes_nothing(db, tmp_path):
    public = tmp_path / "public"
    _seed(db, public)
    assert file_cleanup.cleanup_orphaned_files(db, public, older_than_days=7, dry_run=True, now=NOW) == (0, 0)
    assert db["filestorages"].count_documents({}) == 4
    assert (public / "uploads" / "old.pdf").exists()


def test_nothing_to_clean(db, tmp_path, capsys):
    assert file_cleanup.run(db, tmp_path) == 0
    assert "No orphaned files to clean up." in capsys.readouterr().out


def test_paths_outside_public_dir_are_rejected(tmp_path):
    with pytest.raises(ValueError):
        file_cleanup.physical_path(tmp_path / "public", "../../etc/passwd")
    assert file_cleanup.physical_path(tmp_path, "/uploads/a.pdf") == (tmp_path / "uploads" / "a.pdf").resolve()


def test_record_delete_failure_counts_as_error(db, tmp_path):
    public = tmp_path / "public"
    _seed(db, public)
    db["filestorages"].fail_on["delete_one"] = RuntimeError("not authorized")
    deleted, errors = file_cleanup.cleanup_orphaned_files(db, public, older_than_days=7, now=NOW)
    assert (deleted, errors) == (0, 2)
