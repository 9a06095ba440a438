"""
Predicate builder for optional report/listing filters.

Collects clauses and their bind parameters side by side so values never end
up inside the SQL string. Blank filter values are skipped, which lets callers
pass query-string parameters straight through.

Usage:
    where = Predicates("w").equals("ss.year_id", year_id).contains("s.name", name)
    sql = f"SELECT ... FROM student_master s {where.sql('WHERE')}"
    db.execute(text(sql), where.params)
"""

from typing import Any, Dict, List


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class Predicates:
    def __init__(self, prefix: str = "p"):
        self.prefix = prefix
        self.clauses: List[str] = []
        self.params: Dict[str, Any] = {}

    def _bind(self, value: Any) -> str:
        name = f"{self.prefix}{len(self.params)}"
        self.params[name] = value
        return name

    def raw(self, clause: str) -> "Predicates":
        """Add a clause with no bind parameters (fixed SQL only)."""
        self.clauses.append(clause)
        return self

    def equals(self, column: str, value: Any) -> "Predicates":
        if _is_blank(value):
            return self
        self.clauses.append(f"{column} = :{self._bind(value)}")
        return self

    def contains(self, column: str, value: Any) -> "Predicates":
        """Case-insensitive substring match."""
        if _is_blank(value):
            return self
        name = self._bind(f"%{value}%")
        self.clauses.append(f"LOWER({column}) LIKE LOWER(:{name})")
        return self

    def starts_with(self, column: str, value: Any) -> "Predicates":
        """Prefix match on the text form of the column (works for numbers too)."""
        if _is_blank(value):
            return self
        name = self._bind(f"{value}%")
        self.clauses.append(f"LOWER(CAST({column} AS VARCHAR)) LIKE LOWER(:{name})")
        return self

    def any_contains(self, columns: List[str], value: Any) -> "Predicates":
        """OR-group of substring matches sharing one parameter."""
        if _is_blank(value):
            return self
        name = self._bind(f"%{value}%")
        group = " OR ".join(f"LOWER({column}) LIKE LOWER(:{name})" for column in columns)
        self.clauses.append(f"({group})")
        return self

    def is_null(self, column: str) -> "Predicates":
        self.clauses.append(f"{column} IS NULL")
        return self

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def sql(self, keyword: str = "WHERE") -> str:
        """Render as `<keyword> a AND b`, or an empty string when nothing was added."""
        if not self.clauses:
            return ""
        return f"{keyword} " + " AND ".join(self.clauses)
