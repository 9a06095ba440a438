#!/usr/bin/env python3
"""
Upload Folder Cleanup

Compares every upload folder with the database column that references it:
- MISSING: file named in the database but not on disk (reported only)
- ORPHAN:  file on disk that no row references (deleted)

Run from the backend root so relative upload folders resolve:
    python scripts/cleanup_orphans.py

Do not run two sweeps against the same folders at once.
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.postgres import get_db_session
from app.services.orphan_reconciler import (
    UPLOAD_BINDINGS, BindingReport, BindingStatus, reconcile_uploads
)


def print_report(report: BindingReport):
    print("\n" + "=" * 60)
    print(f"🔍 {report.display_name}")
    print(f"   Folder: {report.folder_path}")
    print("=" * 60)

    if report.status is BindingStatus.failed:
        print(f"❌ Database query failed: {report.error}")
        return

    print(f"📊 Database references: {report.referenced_count}")

    if report.status is BindingStatus.skipped:
        print(f"❌ {report.error} (skipping cleanup for this folder)")
        return

    print(f"📂 Files on disk:       {report.on_disk_count}")

    if report.missing:
        print(f"\n⚠️  MISSING FILES (in DB, not on disk): {len(report.missing)}")
        for name in report.missing:
            print(f"   ❌ Missing: {name}")
    else:
        print("✅ Every database reference has its file")

    if not report.orphans:
        print("✨ No orphaned files")
        return

    print(f"\n🗑️  ORPHANED FILES (on disk, not in DB): {report.orphans_found}")
    print(f"   ✅ Removed {report.orphans_deleted}")
    for failure in report.deletion_failures:
        print(f"   ❌ Failed to delete {failure.filename}: {failure.error}")


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level)

    print("🚀 Starting upload folder integrity check...")
    try:
        with get_db_session() as db:
            reports = reconcile_uploads(db, UPLOAD_BINDINGS, upload_root=settings.upload_root)
    except SQLAlchemyError as e:
        print(f"❌ Fatal: database unavailable: {e}")
        return 1

    for report in reports:
        print_report(report)

    print("\n🏁 Check complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
