import pytest

from transit_reports.models.incident import Incident
from transit_reports.utils.query import build_search_filter, escape_like, parse_page_args, total_pages


@pytest.mark.parametrize(
	"term, expected",
	[
		("plain", "plain"),
		("50%", "50\\%"),
		("bus_lane", "bus\\_lane"),
		("a\\b", "a\\\\b"),
		("%_\\", "\\%\\_\\\\"),
	],
)
def test_escape_like(term, expected):
	assert escape_like(term) == expected


@pytest.mark.parametrize("term", [None, "", "   "])
def test_no_search_term_means_no_filter(term):
	assert build_search_filter(term, (Incident.title,)) is None


def test_search_filter_ors_every_column():
	condition = build_search_filter("crash", (Incident.title, Incident.type))
	sql = str(condition.compile(compile_kwargs={"literal_binds": True}))
	assert "incidents.title" in sql
	assert "incidents.type" in sql
	assert " OR " in sql
	assert "%crash%" in sql


@pytest.mark.parametrize(
	"page, limit, expected",
	[
		(None, None, (1, 10)),
		("2", "5", (2, 5)),
		("abc", "xyz", (1, 10)),
		("0", "0", (1, 10)),
		("-4", "-1", (1, 10)),
		("3", "5000", (3, 100)),
	],
)
def test_parse_page_args(page, limit, expected):
	assert parse_page_args(page, limit) == expected


@pytest.mark.parametrize(
	"total, limit, expected",
	[(0, 10, 0), (5, 10, 1), (10, 10, 1), (11, 10, 2), (7, 3, 3)],
)
def test_total_pages(total, limit, expected):
	assert total_pages(total, limit) == expected


def test_search_term_is_matched_unstripped():
	condition = build_search_filter("bus ", (Incident.title,))
	sql = str(condition.compile(compile_kwargs={"literal_binds": True}))
	assert "%bus %" in sql
