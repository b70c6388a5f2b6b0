"""User query normalization — pure parsing of list filters."""

from userdesk.core.user_query import UserQuery, build_user_query, parse_is_active


def test_defaults_have_no_filters():
    query = build_user_query()
    assert query == UserQuery(skip=0, take=50)
    assert query.search is None and query.role is None and query.is_active is None


def test_search_is_trimmed_and_blank_dropped():
    assert build_user_query(search="  ada ").search == "ada"
    assert build_user_query(search="   ").search is None


def test_is_active_coercion():
    assert parse_is_active(None) is None
    assert parse_is_active("true") is True
    assert parse_is_active("TRUE") is True
    assert parse_is_active("false") is False
    assert parse_is_active("yes") is False


def test_empty_role_means_no_role_filter():
    assert build_user_query(role="").role is None
    assert build_user_query(role="ADMIN").role == "ADMIN"


def test_page_bounds_are_clamped():
    query = build_user_query(skip=-5, take=0)
    assert query.skip == 0
    assert query.take == 1
