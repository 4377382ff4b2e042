"""
Shared response pieces: camelCase base model, pagination block, and the
helpers used by every paginated listing.
"""

import math
from typing import Any, List, Sequence, Tuple
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next: bool
    has_prev: bool
    limit: int


def paginate(items: Sequence[Any], page: int, limit: int) -> Tuple[List[Any], Pagination]:
    """Slice an already filtered and sorted sequence; pages are 1-indexed."""
    total = len(items)
    total_pages = math.ceil(total / limit) if limit else 0
    start = (page - 1) * limit
    info = Pagination(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        has_next=page < total_pages,
        has_prev=page > 1,
        limit=limit,
    )
    return list(items[start:start + limit]), info


def validation_messages(errors: Sequence[dict]) -> List[str]:
    """Flatten pydantic error dicts into one readable message per violation."""
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages
