from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
from flask import abort, current_app, request
from sqlalchemy.orm import Query

MAX_LIMIT = 100


@dataclass
class Page:
    items: List
    total: int
    limit: int
    offset: int

    @property
    def has_prev(self) -> bool:
        return self.offset > 0

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def prev_offset(self) -> int:
        return max(0, self.offset - self.limit)

    @property
    def next_offset(self) -> int:
        return self.offset + self.limit


def normalize_pagination(limit_raw, offset_raw, default_limit: int) -> Tuple[int, int]:
    try:
        limit = int(limit_raw) if limit_raw not in (None, '') else default_limit
        offset = int(offset_raw) if offset_raw not in (None, '') else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset


def apply_pagination(q: Query) -> Page:
    try:
        limit, offset = normalize_pagination(
            request.args.get('limit'), request.args.get('offset'), current_app.config['TICKET_PAGE_SIZE'])
    except ValueError as e:
        abort(400, description=str(e))
    total = q.count()
    return Page(items=q.offset(offset).limit(limit).all(), total=total, limit=limit, offset=offset)


def apply_multi_sort(query, sort_expr: str | None, allowed: dict, tie_breaker):
    """Apply multi-field sort to a SQLAlchemy query.
    sort_expr: comma-separated tokens, each optionally prefixed with '-'.
    allowed: mapping of field key -> column object.
    tie_breaker: column to append for deterministic ordering.
    """
    if not sort_expr:
        return query.order_by(tie_breaker.asc())
    clauses = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            abort(400, description=f'Invalid sort field {key}')
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker.asc())
    return query.order_by(*clauses)
