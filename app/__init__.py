"""
Placement & Internship Portal
Admin backend for student placement and internship records.

Architecture:
- PostgreSQL: Students, placements, internships, reference data
- FastAPI: Admin REST endpoints
- scripts/cleanup_orphans.py: Upload folder reconciliation sweep
"""

__version__ = "1.0.0"
