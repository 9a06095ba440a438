from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.postgres as postgres
from app.core.auth import get_current_admin
from app.main import app as fastapi_app

ADMIN_ID = 900

SCHEMA = [
    """CREATE TABLE user_master (
        userid INTEGER PRIMARY KEY, username VARCHAR(100), user_type VARCHAR(20),
        is_enable VARCHAR(1) DEFAULT '1', mod_by INTEGER, mod_time TIMESTAMP)""",
    """CREATE TABLE academic_year (
        year_id INTEGER PRIMARY KEY, year_name VARCHAR(20), mod_by INTEGER, mod_time TIMESTAMP)""",
    """CREATE TABLE session_master (
        session_id INTEGER PRIMARY KEY, session_name VARCHAR(50), year_id INTEGER,
        mod_by INTEGER, mod_time TIMESTAMP)""",
    """CREATE TABLE program_master (program_id INTEGER PRIMARY KEY, program_name VARCHAR(100))""",
    """CREATE TABLE student_master (
        userid INTEGER PRIMARY KEY, rollno VARCHAR(20), name VARCHAR(100), mobile VARCHAR(20),
        email VARCHAR(100), session_id INTEGER, program_id INTEGER,
        is_profile_frozen VARCHAR(3) DEFAULT 'No', is_profile_locked VARCHAR(3) DEFAULT 'No',
        mod_by INTEGER, mod_time TIMESTAMP)""",
    """CREATE TABLE internship_requirement (
        id INTEGER PRIMARY KEY, program_id INTEGER, semester INTEGER, internship_count INTEGER)""",
    """CREATE TABLE student_internship (
        internship_id INTEGER PRIMARY KEY, user_id INTEGER, company_id INTEGER,
        semester INTEGER, session_id INTEGER, certificate VARCHAR(255))""",
    """CREATE TABLE company_type_master (
        type_id INTEGER PRIMARY KEY, type_name VARCHAR(50), mod_by INTEGER, mod_time TIMESTAMP)""",
    """CREATE TABLE company_master (
        company_id INTEGER PRIMARY KEY, company_name VARCHAR(100), type_id INTEGER)""",
    """CREATE TABLE placement_drive (
        drive_id INTEGER PRIMARY KEY, drive_name VARCHAR(100), company_id INTEGER,
        session_id INTEGER, ctc NUMERIC, drive_description TEXT, is_active VARCHAR(1) DEFAULT '1')""",
    """CREATE TABLE student_placement (
        id INTEGER PRIMARY KEY, user_id INTEGER, drive_id INTEGER, is_selected VARCHAR(10),
        ctc NUMERIC, role VARCHAR(100), place VARCHAR(100), offerletter_file_name VARCHAR(255))""",
    """CREATE TABLE expenditure (
        exp_id INTEGER PRIMARY KEY, expense_on VARCHAR(100), session_id INTEGER,
        amount NUMERIC, bill_file VARCHAR(255), mod_time TIMESTAMP)""",
    """CREATE TABLE department_master (
        department_id INTEGER PRIMARY KEY, department_name VARCHAR(100), mod_by INTEGER, mod_time TIMESTAMP)""",
]


class Seeder:
    """Inserts rows with the minimum columns each test cares about."""

    def __init__(self, session):
        self.db = session
        self.db.execute(text(
            "INSERT INTO user_master (userid, username, user_type, is_enable) VALUES (:id, 'admin', 'admin', '1')"
        ), {"id": ADMIN_ID})
        self.db.execute(text("INSERT INTO academic_year (year_id, year_name) VALUES (1, '2025-26')"))
        self.db.execute(text("INSERT INTO session_master (session_id, session_name, year_id) VALUES (1, 'Batch 2025', 1)"))
        self.db.execute(text("INSERT INTO program_master (program_id, program_name) VALUES (1, 'MCA'), (2, 'MBA')"))
        self.db.execute(text("INSERT INTO company_type_master (type_id, type_name) VALUES (1, 'Product')"))
        self.db.execute(text("INSERT INTO company_master (company_id, company_name, type_id) VALUES (1, 'Acme', 1)"))
        self.db.execute(text(
            "INSERT INTO placement_drive (drive_id, drive_name, company_id, session_id, ctc) VALUES (1, 'Acme SDE', 1, 1, 12)"
        ))
        self.db.commit()

    def student(self, userid, program_id=1, rollno=None, name=None, frozen="No", locked="No"):
        self.db.execute(text("INSERT INTO user_master (userid, username, user_type, is_enable) VALUES (:id, :u, 'student', '1')"),
                        {"id": userid, "u": f"student{userid}"})
        self.db.execute(text("""
            INSERT INTO student_master (userid, rollno, name, session_id, program_id, is_profile_frozen, is_profile_locked)
            VALUES (:id, :rollno, :name, 1, :pid, :frozen, :locked)
        """), {"id": userid, "rollno": rollno or f"R{userid}", "name": name or f"Student {userid}",
               "pid": program_id, "frozen": frozen, "locked": locked})
        self.db.commit()

    def requirement(self, program_id, semester, count):
        self.db.execute(text(
            "INSERT INTO internship_requirement (program_id, semester, internship_count) VALUES (:p, :s, :c)"
        ), {"p": program_id, "s": semester, "c": count})
        self.db.commit()

    def internship(self, userid, semester, certificate=None):
        self.db.execute(text(
            "INSERT INTO student_internship (user_id, company_id, semester, session_id, certificate) VALUES (:u, 1, :s, 1, :c)"
        ), {"u": userid, "s": semester, "c": certificate})
        self.db.commit()

    def application(self, userid, status="Pending", drive_id=1, offer_letter=None, role="SDE", place="Pune"):
        self.db.execute(text("""
            INSERT INTO student_placement (user_id, drive_id, is_selected, ctc, role, place, offerletter_file_name)
            VALUES (:u, :d, :s, 12, :r, :p, :f)
        """), {"u": userid, "d": drive_id, "s": status, "r": role, "p": place, "f": offer_letter})
        self.db.commit()

    def flags(self, userid) -> tuple:
        row = self.db.execute(text(
            "SELECT is_profile_frozen, is_profile_locked, mod_by FROM student_master WHERE userid = :id"
        ), {"id": userid}).fetchone()
        return tuple(row) if row else None


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seed(db):
    return Seeder(db)


@pytest.fixture()
def raw_client(session_factory, monkeypatch):
    """Client on the test database with real authentication."""
    monkeypatch.setattr(postgres, "SessionLocal", session_factory)
    with TestClient(fastapi_app) as client:
        yield client


@pytest.fixture()
def client(raw_client):
    """Client on the test database, already signed in as an admin."""
    fastapi_app.dependency_overrides[get_current_admin] = lambda: {
        "userid": ADMIN_ID, "username": "admin", "role": "admin"
    }
    yield raw_client
    fastapi_app.dependency_overrides.pop(get_current_admin, None)
