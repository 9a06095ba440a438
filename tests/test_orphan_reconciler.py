"""
Tests for the upload folder reconciliation sweep.
"""
from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from app.services import orphan_reconciler
from app.services.orphan_reconciler import (
    BindingStatus,
    UploadBinding,
    reconcile_binding,
    reconcile_uploads,
)

CERTS = UploadBinding("Internship Certificates", "student_internship", "certificate", "certificates")
OFFERS = UploadBinding("Placement Offer Letters", "student_placement", "offerletter_file_name", "offer_letters")


def _touch(folder, *names):
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_text("x")


def _files(folder):
    return sorted(os.listdir(folder))


def test_missing_reported_and_orphans_deleted_then_idempotent(db, seed, tmp_path):
    seed.student(1)
    seed.internship(1, 3, certificate="a.pdf")
    seed.internship(1, 4, certificate="b.pdf")
    _touch(tmp_path / "certificates", "a.pdf", "c.pdf")

    first = reconcile_binding(db, CERTS, upload_root=str(tmp_path))

    assert first.status is BindingStatus.ok
    assert first.referenced_count == 2
    assert first.on_disk_count == 2
    assert first.missing == ["b.pdf"]
    assert first.orphans == ["c.pdf"]
    assert first.orphans_deleted == 1
    assert _files(tmp_path / "certificates") == ["a.pdf"]

    second = reconcile_binding(db, CERTS, upload_root=str(tmp_path))

    assert second.missing == ["b.pdf"]
    assert second.orphans == []
    assert second.orphans_found == 0
    assert _files(tmp_path / "certificates") == ["a.pdf"]


def test_null_empty_and_duplicate_references_are_collapsed(db, seed, tmp_path):
    seed.student(1)
    seed.internship(1, 1, certificate="a.pdf")
    seed.internship(1, 2, certificate="a.pdf")
    seed.internship(1, 3, certificate="")
    seed.internship(1, 4, certificate=None)
    _touch(tmp_path / "certificates", "a.pdf")

    report = reconcile_binding(db, CERTS, upload_root=str(tmp_path))

    assert report.referenced_count == 1
    assert report.missing == []
    assert report.orphans == []


def test_hidden_entries_are_never_touched(db, seed, tmp_path):
    _touch(tmp_path / "certificates", ".gitignore", ".DS_Store", "stray.pdf")

    report = reconcile_binding(db, CERTS, upload_root=str(tmp_path))

    assert report.on_disk_count == 1
    assert report.orphans == ["stray.pdf"]
    assert _files(tmp_path / "certificates") == [".DS_Store", ".gitignore"]


def test_inaccessible_folder_is_skipped_and_sweep_continues(db, seed, tmp_path):
    seed.student(1)
    seed.application(1, status="Yes", offer_letter="offer.pdf")
    _touch(tmp_path / "offer_letters", "offer.pdf", "old.pdf")

    reports = reconcile_uploads(db, [CERTS, OFFERS], upload_root=str(tmp_path))

    assert reports[0].status is BindingStatus.skipped
    assert "Folder inaccessible" in reports[0].error
    assert reports[1].status is BindingStatus.ok
    assert reports[1].orphans_deleted == 1
    assert _files(tmp_path / "offer_letters") == ["offer.pdf"]


def test_query_failure_marks_binding_failed_and_sweep_continues(db, seed, tmp_path):
    broken = UploadBinding("Broken", "no_such_table", "file_name", "broken")
    _touch(tmp_path / "broken", "keep.pdf")
    _touch(tmp_path / "certificates", "stray.pdf")

    reports = reconcile_uploads(db, [broken, CERTS], upload_root=str(tmp_path))

    assert reports[0].status is BindingStatus.failed
    assert reports[0].error
    # Nothing is deleted when the reference set is unknown
    assert _files(tmp_path / "broken") == ["keep.pdf"]
    assert reports[1].orphans_deleted == 1


def test_one_failed_deletion_does_not_stop_the_others(db, seed, tmp_path):
    _touch(tmp_path / "certificates", "a.pdf", "b.pdf", "c.pdf")
    real_remove = os.remove

    def remove(path):
        if path.endswith("b.pdf"):
            raise PermissionError(13, "Permission denied", path)
        real_remove(path)

    with patch.object(orphan_reconciler, "delete_file", side_effect=remove):
        report = reconcile_binding(db, CERTS, upload_root=str(tmp_path))

    assert report.orphans_found == 3
    assert report.orphans_deleted == 2
    assert [f.filename for f in report.deletion_failures] == ["b.pdf"]
    assert "Permission denied" in report.deletion_failures[0].error
    assert _files(tmp_path / "certificates") == ["b.pdf"]


def test_report_to_dict(db, seed, tmp_path):
    _touch(tmp_path / "certificates", "x.pdf")

    data = reconcile_binding(db, CERTS, upload_root=str(tmp_path)).to_dict()

    assert data["status"] == "ok"
    assert data["orphans_found"] == 1
    assert data["orphans_deleted"] == 1
    assert data["deletion_failures"] == []


@pytest.mark.parametrize("table, column", [
    ("student_internship; DROP TABLE x", "certificate"),
    ("student_internship", "certificate OR 1=1"),
    ("1table", "certificate"),
])
def test_binding_rejects_non_identifiers(table, column):
    with pytest.raises(ValueError):
        UploadBinding("Bad", table, column, "uploads")


def test_default_bindings_cover_every_upload_folder():
    assert [(b.table_name, b.column_name, b.folder_path) for b in orphan_reconciler.UPLOAD_BINDINGS] == [
        ("student_internship", "certificate", "uploads/certificates"),
        ("student_placement", "offerletter_file_name", "uploads/offer_letters"),
        ("expenditure", "bill_file", "uploads/expenditure"),
    ]
