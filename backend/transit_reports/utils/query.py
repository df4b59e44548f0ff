from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy import or_


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
	"""Neutralize LIKE metacharacters so the term only matches literally."""
	return (
		term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
		.replace("%", LIKE_ESCAPE + "%")
		.replace("_", LIKE_ESCAPE + "_")
	)


def build_search_filter(term: str | None, columns):
	"""
	Case-insensitive, unanchored substring match of ``term`` against any of
	``columns``. Returns ``None`` when there is nothing to filter on.
	"""
	if not term or not term.strip() or not columns:
		return None

	pattern = f"%{escape_like(term)}%"
	return or_(*[col.ilike(pattern, escape=LIKE_ESCAPE) for col in columns])


def _to_int(value, default: int) -> int:
	try:
		return int(value)
	except (TypeError, ValueError):
		return default


def parse_page_args(page, limit, default_limit: int = 10, max_limit: int = 100) -> tuple[int, int]:
	"""Missing, non-numeric or non-positive values fall back to the defaults."""
	page_int = _to_int(page, 1)
	if page_int < 1:
		page_int = 1
	limit_int = _to_int(limit, default_limit)
	if limit_int < 1:
		limit_int = default_limit
	limit_int = min(limit_int, max_limit)
	return page_int, limit_int


def total_pages(total: int, limit: int) -> int:
	return math.ceil(total / limit) if limit > 0 else 0


@dataclass(frozen=True)
class Page:
	items: list
	total: int
	page: int
	limit: int

	@property
	def total_pages(self) -> int:
		return total_pages(self.total, self.limit)


def paginate(query, page: int, limit: int, order_by) -> Page:
	"""
	Count the filtered set, then return the ``limit``-sized window starting
	at ``(page - 1) * limit`` of the query sorted by ``order_by``.
	A page past the end yields an empty window.
	"""
	total = query.order_by(None).count()
	skip = (page - 1) * limit
	if skip >= total:
		return Page(items=[], total=int(total), page=page, limit=limit)
	items = query.order_by(*order_by).offset(skip).limit(limit).all()
	return Page(items=items, total=int(total), page=page, limit=limit)
