"""Column types shared by the store tables"""
import uuid
from typing import Any, Optional

from sqlalchemy import String, TypeDecorator


def generate_uuid() -> str:
    return str(uuid.uuid4())


def canonical_id(value: Any) -> str:
    """Lower-case hyphenated UUID text; anything that is not a UUID passes through as text"""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        return str(value)


class GUID(TypeDecorator):
    """
    Ids stored as 36-character strings so SQLite and PostgreSQL agree.

    Bound values are canonicalised, so `UUID` objects and upper-case ids
    from request paths find the same row.
    """
    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        return canonical_id(value)

    def process_result_value(self, value: Any, dialect) -> Optional[str]:
        return value
