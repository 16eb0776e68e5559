"""Unit tests for QueryParser."""

import pytest

from chatalchemy.application.services import QueryParser, QueryParserConfig
from chatalchemy.application.services.query_parser import extract_columns, extract_conditions
from chatalchemy.domain.entities import Condition


@pytest.fixture
def parser() -> QueryParser:
    return QueryParser()


def test_terms_are_lowercased_and_short_tokens_dropped(parser):
    descriptor = parser.parse("What is the Revenue in Q1 of 2023")

    assert descriptor.terms == ("what", "the", "revenue", "2023")


def test_terms_are_deduplicated_in_first_seen_order(parser):
    descriptor = parser.parse("sales SALES revenue sales")

    assert descriptor.terms == ("sales", "revenue")


def test_min_term_length_is_configurable():
    parser = QueryParser(QueryParserConfig(min_term_length=2))

    assert parser.parse("Q1 of x").terms == ("q1", "of")


def test_empty_query_has_no_hints(parser):
    descriptor = parser.parse("")

    assert descriptor.terms == ()
    assert descriptor.conditions == ()
    assert descriptor.requested_columns == ()
    assert descriptor.wants_chart is False
    assert descriptor.wants_table is False


def test_quoted_condition_value(parser):
    descriptor = parser.parse("list users where status = 'active'")

    assert descriptor.conditions == (Condition(field="status", value="active"),)


def test_condition_with_colon_and_double_quotes():
    assert extract_conditions('drugs where Disease: "type 2 diabetes"') == (
        Condition(field="disease", value="type 2 diabetes"),
    )


def test_multiple_where_clauses_are_all_kept():
    conditions = extract_conditions("rows where a=1 where b=2")

    assert conditions == (Condition("a", "1"), Condition("b", "2"))


def test_condition_with_empty_value_is_ignored():
    assert extract_conditions("rows where status = ''") == ()


def test_bare_condition_value_drops_sentence_punctuation():
    assert extract_conditions("Show revenue where month=Jan.") == (Condition("month", "Jan"),)
    assert extract_conditions("any rows where status = active?!") == (Condition("status", "active"),)


def test_quoted_condition_value_keeps_punctuation():
    assert extract_conditions("rows where code = 'A.1.'") == (Condition("code", "A.1."),)


def test_query_without_where_has_no_conditions(parser):
    assert parser.parse("show me everything").conditions == ()


def test_show_columns_comma_separated():
    assert extract_columns("show columns name, revenue") == ("name", "revenue")


def test_show_columns_stops_at_where(parser):
    descriptor = parser.parse("show columns revenue where month=Jan")

    assert descriptor.requested_columns == ("revenue",)
    assert descriptor.conditions == (Condition("month", "Jan"),)


def test_show_fields_singular_alias():
    assert extract_columns("Show field Target") == ("target",)


def test_no_column_request():
    assert extract_columns("show table sales") == ()


@pytest.mark.parametrize(
    "query, chart, table",
    [
        ("show graph of revenue", True, True),
        ("plot sales", True, False),
        ("display the chart", True, True),
        ("list drugs", False, True),
        ("what treats diabetes", False, False),
    ],
)
def test_intent_flags(parser, query, chart, table):
    descriptor = parser.parse(query)

    assert descriptor.wants_chart is chart
    assert descriptor.wants_table is table


def test_intent_triggers_are_configurable():
    parser = QueryParser(QueryParserConfig(chart_triggers=("trend",), table_triggers=("grid",)))

    descriptor = parser.parse("revenue trend in a grid, not a chart")

    assert descriptor.wants_chart is True
    assert descriptor.wants_table is True
    assert parser.parse("show chart").wants_chart is False


def test_parse_is_deterministic(parser):
    query = "show columns revenue where month=Jan"

    assert parser.parse(query) == parser.parse(query)
