"""
Admin Reports

Cross-entity reports for one academic year. Every optional filter goes
through Predicates, so the SQL text only changes by which fixed clauses are
present and all values stay bound parameters.

Text filters are case-insensitive substring matches; numeric filters (ctc,
counts, semester) match by prefix on the number's text form, which is what
the dashboard's per-column filter boxes send.
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.query_builder import Predicates
from app.models.student import SelectionStatus

_SELECTED_COUNT = "SUM(CASE WHEN sp.is_selected = :selected THEN 1 ELSE 0 END)"
REJECTED_ACCOUNT = "2"


def _run(db: Session, sql: str, *predicates: Predicates, **extra) -> list:
    params = dict(extra)
    for p in predicates:
        params.update(p.params)
    return [dict(r) for r in db.execute(text(sql), params).mappings().all()]


def student_placement_stats(
    db: Session,
    year_id: int,
    student_name: Optional[str] = None,
    rollno: Optional[str] = None,
    program_name: Optional[str] = None,
    session_name: Optional[str] = None,
    count_apply: Optional[str] = None,
    count_selected: Optional[str] = None,
) -> list:
    """Applications and selections per student."""
    where = (
        Predicates("w")
        .equals("ss.year_id", year_id)
        .contains("s.name", student_name)
        .starts_with("s.rollno", rollno)
        .contains("p.program_name", program_name)
        .contains("ss.session_name", session_name)
    )
    having = (
        Predicates("h")
        .starts_with("COUNT(sp.drive_id)", count_apply)
        .starts_with(_SELECTED_COUNT, count_selected)
    )
    sql = f"""
        SELECT s.name AS student_name, s.rollno, p.program_name, ss.session_name,
               COUNT(sp.drive_id) AS count_apply,
               {_SELECTED_COUNT} AS count_selected
        FROM student_master AS s
        LEFT JOIN student_placement AS sp ON s.userid = sp.user_id
        JOIN session_master AS ss ON s.session_id = ss.session_id
        JOIN program_master AS p ON s.program_id = p.program_id
        {where.sql("WHERE")}
        GROUP BY s.userid, s.name, s.rollno, p.program_name, ss.session_name
        {having.sql("HAVING")}
        ORDER BY s.name
    """
    return _run(db, sql, where, having, selected=SelectionStatus.selected.db_value)


def placement_drive_stats(
    db: Session,
    year_id: int,
    is_active: Optional[str] = None,
    drive_name: Optional[str] = None,
    company_name: Optional[str] = None,
    ctc: Optional[str] = None,
    count_apply: Optional[str] = None,
    count_selected: Optional[str] = None,
) -> list:
    """Applications and selections per placement drive."""
    if is_active == "all":
        is_active = None
    where = (
        Predicates("w")
        .equals("sm.year_id", year_id)
        .equals("pd.is_active", is_active)
        .contains("pd.drive_name", drive_name)
        .contains("cm.company_name", company_name)
        .starts_with("pd.ctc", ctc)
    )
    having = (
        Predicates("h")
        .starts_with("COUNT(sp.user_id)", count_apply)
        .starts_with(_SELECTED_COUNT, count_selected)
    )
    sql = f"""
        SELECT pd.drive_id, pd.drive_name, cm.company_name, pd.ctc,
               pd.drive_description AS description, pd.is_active,
               COUNT(sp.user_id) AS count_apply,
               {_SELECTED_COUNT} AS count_selected
        FROM placement_drive AS pd
        JOIN session_master AS sm ON pd.session_id = sm.session_id
        JOIN company_master AS cm ON pd.company_id = cm.company_id
        LEFT JOIN student_placement AS sp ON pd.drive_id = sp.drive_id
        {where.sql("WHERE")}
        GROUP BY pd.drive_id, pd.drive_name, cm.company_name, pd.ctc, pd.drive_description, pd.is_active
        {having.sql("HAVING")}
        ORDER BY pd.drive_id DESC
    """
    return _run(db, sql, where, having, selected=SelectionStatus.selected.db_value)


def selected_students(
    db: Session,
    year_id: int,
    student_name: Optional[str] = None,
    rollno: Optional[str] = None,
    program_name: Optional[str] = None,
    drive_name: Optional[str] = None,
    company_name: Optional[str] = None,
    company_type: Optional[str] = None,
    ctc: Optional[str] = None,
    role: Optional[str] = None,
    place: Optional[str] = None,
) -> list:
    """Every selected application of the year's students."""
    where = (
        Predicates("w")
        .equals("sm.year_id", year_id)
        .equals("sp.is_selected", SelectionStatus.selected.db_value)
        .contains("s.name", student_name)
        .starts_with("s.rollno", rollno)
        .contains("pm.program_name", program_name)
        .contains("pd.drive_name", drive_name)
        .contains("cm.company_name", company_name)
        .contains("ct.type_name", company_type)
        .starts_with("sp.ctc", ctc)
        .contains("sp.role", role)
        .contains("sp.place", place)
    )
    sql = f"""
        SELECT s.name AS student_name, s.rollno, pm.program_name, pd.drive_name,
               cm.company_name, ct.type_name AS company_type, sp.ctc, sp.role, sp.place
        FROM student_placement AS sp
        JOIN student_master AS s ON sp.user_id = s.userid
        JOIN placement_drive AS pd ON sp.drive_id = pd.drive_id
        JOIN company_master AS cm ON pd.company_id = cm.company_id
        JOIN company_type_master AS ct ON cm.type_id = ct.type_id
        JOIN program_master AS pm ON s.program_id = pm.program_id
        JOIN session_master AS sm ON s.session_id = sm.session_id
        {where.sql("WHERE")}
        ORDER BY s.name, pd.drive_name
    """
    return _run(db, sql, where)


def student_internship_report(
    db: Session,
    year_id: int,
    student_name: Optional[str] = None,
    rollno: Optional[str] = None,
    program_name: Optional[str] = None,
    session_name: Optional[str] = None,
    semester: Optional[str] = None,
    internship_count: Optional[str] = None,
) -> list:
    """
    Internship count per student per semester.

    Students without internships still appear once with a NULL semester and a
    count of 0; filter semester "n/a" or "0" to list only those.
    """
    where = (
        Predicates("w")
        .equals("sm.year_id", year_id)
        .contains("s.name", student_name)
        .contains("s.rollno", rollno)
        .contains("p.program_name", program_name)
        .contains("iss.session_name", session_name)
    )
    having = Predicates("h")
    if semester is not None and semester.strip().lower() in ("n/a", "0"):
        having.is_null("si.semester")
    else:
        having.starts_with("si.semester", semester)
    having.starts_with("COUNT(si.internship_id)", internship_count)

    sql = f"""
        SELECT s.userid, s.name AS student_name, s.rollno, p.program_name,
               si.semester, iss.session_name AS internship_session,
               COUNT(si.internship_id) AS internship_count
        FROM student_master AS s
        JOIN session_master AS sm ON s.session_id = sm.session_id
        JOIN program_master AS p ON s.program_id = p.program_id
        LEFT JOIN student_internship AS si ON s.userid = si.user_id
        LEFT JOIN session_master AS iss ON si.session_id = iss.session_id
        {where.sql("WHERE")}
        GROUP BY s.userid, s.name, s.rollno, p.program_name, si.semester, iss.session_name
        {having.sql("HAVING")}
        ORDER BY s.name, si.semester
    """
    return _run(db, sql, where, having)


def expenditure_report(
    db: Session,
    year_id: int,
    expense_on: Optional[str] = None,
    session_name: Optional[str] = None,
    amount: Optional[str] = None,
) -> list:
    """Expenses booked against the year's sessions, latest change first."""
    where = (
        Predicates("w")
        .equals("s.year_id", year_id)
        .contains("e.expense_on", expense_on)
        .contains("s.session_name", session_name)
        .starts_with("e.amount", amount)
    )
    sql = f"""
        SELECT e.exp_id AS expenditure_id, e.expense_on, s.session_name, e.amount,
               e.bill_file AS bill_file_path
        FROM expenditure AS e
        JOIN session_master AS s ON e.session_id = s.session_id
        {where.sql("WHERE")}
        ORDER BY e.mod_time DESC
    """
    return _run(db, sql, where)


# ============================================================
# REFERENCE DATA
# ============================================================

def list_academic_years(db: Session) -> list:
    return _run(db, """
        SELECT ay.year_id, ay.year_name, ay.mod_time, um.username AS modified_by
        FROM academic_year AS ay
        LEFT JOIN user_master AS um ON ay.mod_by = um.userid
        ORDER BY ay.year_id DESC
    """)


def list_academic_sessions(db: Session) -> list:
    return _run(db, """
        SELECT s.session_id, s.session_name, ay.year_name, s.mod_time, um.username AS modified_by
        FROM session_master AS s
        JOIN academic_year AS ay ON s.year_id = ay.year_id
        LEFT JOIN user_master AS um ON s.mod_by = um.userid
        ORDER BY s.session_id DESC
    """)


def list_company_types(db: Session) -> list:
    return _run(db, """
        SELECT ct.type_id, ct.type_name, ct.mod_time, um.username AS modified_by
        FROM company_type_master AS ct
        LEFT JOIN user_master AS um ON ct.mod_by = um.userid
        ORDER BY ct.type_id DESC
    """)


def list_departments(db: Session) -> list:
    return _run(db, """
        SELECT d.department_id, d.department_name, d.mod_time, um.username AS modified_by
        FROM department_master AS d
        LEFT JOIN user_master AS um ON d.mod_by = um.userid
        ORDER BY d.department_id DESC
    """)


def list_rejected_students(db: Session) -> list:
    """Accounts an admin has rejected (user_master.is_enable = '2')."""
    return _run(db, """
        SELECT u.userid, s.name, s.rollno, s.mobile, u.username, u.user_type,
               u.mod_time, um.username AS modified_by
        FROM user_master AS u
        LEFT JOIN student_master AS s ON u.userid = s.userid
        LEFT JOIN user_master AS um ON u.mod_by = um.userid
        WHERE u.is_enable = :rejected
        ORDER BY u.mod_time DESC
    """, rejected=REJECTED_ACCOUNT)
