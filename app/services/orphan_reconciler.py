"""
Upload Folder Reconciliation

Each UploadBinding ties a table column holding stored filenames to the folder
the files were uploaded into. For every binding, in order:

1. referenced = distinct non-empty filenames in table.column
2. on_disk    = folder entries, hidden entries (".*") excluded
3. missing    = referenced - on_disk   (reported only, cannot be repaired)
4. orphans    = on_disk - referenced   (deleted one by one)

A binding that fails never stops the sweep: an unreadable folder is reported
as skipped, a query error as failed, and a file that cannot be deleted is
listed in deletion_failures while the other orphans are still removed.

There is no locking between sweeps; run one at a time per folder.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class UploadBinding:
    display_name: str
    table_name: str
    column_name: str
    folder_path: str

    def __post_init__(self):
        # Table and column are interpolated into SQL, so only plain identifiers
        for value in (self.table_name, self.column_name):
            if not _IDENTIFIER.match(value):
                raise ValueError(f"Invalid SQL identifier in upload binding: {value!r}")


UPLOAD_BINDINGS = [
    UploadBinding("Internship Certificates", "student_internship", "certificate", "uploads/certificates"),
    UploadBinding("Placement Offer Letters", "student_placement", "offerletter_file_name", "uploads/offer_letters"),
    UploadBinding("Expenditure Bills", "expenditure", "bill_file", "uploads/expenditure"),
]


class BindingStatus(str, Enum):
    ok = "ok"
    skipped = "skipped"   # folder missing or unreadable
    failed = "failed"     # reference query failed


@dataclass
class DeletionFailure:
    filename: str
    error: str


@dataclass
class BindingReport:
    display_name: str
    folder_path: str
    status: BindingStatus = BindingStatus.ok
    referenced_count: int = 0
    on_disk_count: int = 0
    missing: List[str] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)
    orphans_deleted: int = 0
    deletion_failures: List[DeletionFailure] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def orphans_found(self) -> int:
        return len(self.orphans)

    def to_dict(self) -> dict:
        return {
            "display_name": self.display_name,
            "folder_path": self.folder_path,
            "status": self.status.value,
            "referenced_count": self.referenced_count,
            "on_disk_count": self.on_disk_count,
            "missing": list(self.missing),
            "orphans_found": self.orphans_found,
            "orphans_deleted": self.orphans_deleted,
            "deletion_failures": [
                {"filename": f.filename, "error": f.error} for f in self.deletion_failures
            ],
            "error": self.error,
        }


def fetch_referenced_filenames(db: Session, binding: UploadBinding) -> set:
    column, table = binding.column_name, binding.table_name
    rows = db.execute(text(
        f"SELECT DISTINCT {column} FROM {table} "
        f"WHERE {column} IS NOT NULL AND {column} != ''"
    )).fetchall()
    return {r[0] for r in rows}


def list_folder(folder: str) -> List[str]:
    """Visible entries of the folder. Raises OSError when it cannot be read."""
    if not os.path.isdir(folder):
        raise FileNotFoundError(f"Folder not found: {folder}")
    return [name for name in os.listdir(folder) if not name.startswith(".")]


def delete_file(path: str) -> None:
    os.remove(path)


def resolve_folder(binding: UploadBinding, upload_root: str = ".") -> str:
    return os.path.abspath(os.path.join(upload_root, binding.folder_path))


def reconcile_binding(db: Session, binding: UploadBinding, upload_root: str = ".") -> BindingReport:
    folder = resolve_folder(binding, upload_root)
    report = BindingReport(display_name=binding.display_name, folder_path=folder)

    try:
        referenced = fetch_referenced_filenames(db, binding)
    except SQLAlchemyError as e:
        logger.error("%s: could not read %s.%s: %s",
                     binding.display_name, binding.table_name, binding.column_name, e)
        db.rollback()
        report.status = BindingStatus.failed
        report.error = str(e)
        return report
    report.referenced_count = len(referenced)

    try:
        on_disk = set(list_folder(folder))
    except OSError as e:
        logger.warning("%s: folder inaccessible, skipping: %s", binding.display_name, e)
        report.status = BindingStatus.skipped
        report.error = f"Folder inaccessible: {folder}"
        return report
    report.on_disk_count = len(on_disk)

    report.missing = sorted(referenced - on_disk)
    report.orphans = sorted(on_disk - referenced)

    for name in report.orphans:
        try:
            delete_file(os.path.join(folder, name))
        except OSError as e:
            logger.error("%s: failed to delete %s: %s", binding.display_name, name, e)
            report.deletion_failures.append(DeletionFailure(filename=name, error=str(e)))
            continue
        report.orphans_deleted += 1

    logger.info(
        "%s: %d referenced, %d on disk, %d missing, %d/%d orphans deleted",
        binding.display_name, report.referenced_count, report.on_disk_count,
        len(report.missing), report.orphans_deleted, report.orphans_found,
    )
    return report


def reconcile_uploads(
    db: Session,
    bindings: Iterable[UploadBinding] = UPLOAD_BINDINGS,
    upload_root: str = ".",
) -> List[BindingReport]:
    """Run every binding in order and return one report per binding."""
    return [reconcile_binding(db, binding, upload_root) for binding in bindings]
