"""Custom SQLAlchemy types with cross-DB support."""

import json
from typing import List, Optional

from sqlalchemy import Text, TypeDecorator


class TagListType(TypeDecorator):
    """
    Store a list of tag strings:

    - On PostgreSQL: TEXT[]
    - Elsewhere (SQLite in tests): JSON encoded in a TEXT column

    Always hands back a List[str], never None.
    """

    cache_ok = True
    impl = Text

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import ARRAY

            return dialect.type_descriptor(ARRAY(Text()))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[List[str]], dialect):
        values = [str(v) for v in (value or [])]
        if dialect.name == "postgresql":
            return values
        return json.dumps(values, ensure_ascii=False)

    def process_result_value(self, value, dialect) -> List[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(v) for v in value]
        try:
            return [str(v) for v in json.loads(value)]
        except (TypeError, ValueError):
            return []
