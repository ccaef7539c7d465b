"""Tests for the optional function library."""

import pytest

from jsonexpand import CompileError, Template, compute_functions
from jsonexpand.template import OrderedContainer, format_date, java_to_strftime, jsonpath, jsonpath_first


class TestDates:

    @pytest.mark.parametrize("pattern, expected", [
        ("yyyy-MM-dd", "%Y-%m-%d"),
        ("MMM dd, yyyy", "%b %d, %Y"),
        ("EEEE, MMMM dd", "%A, %B %d"),
        ("hh:mm a", "%I:%M %p"),
        ("yyyy-MM-dd'T'HH:mm:ss", "%Y-%m-%dT%H:%M:%S"),
        ("HH 'o''clock'", "%H o'clock"),
        ("dd''MM", "%d'%m"),
        ("dd% MM", "%d%% %m"),
    ])
    def test_java_to_strftime(self, pattern, expected):
        assert java_to_strftime(pattern) == expected

    def test_format_date(self):
        assert format_date("2025-12-01", "MMM dd, yyyy") == "Dec 01, 2025"
        assert format_date("2025-12-01T08:05:00-05:00", "dd/MM 'at' HH:mm") == "01/12 at 08:05"

    def test_unparseable_date_returned_unchanged(self):
        assert format_date("garbage", "yyyy") == "garbage"
        assert format_date(None, "yyyy") is None


class TestJsonPath:

    def test_all_matches(self):
        data = {"items": [{"price": 1}, {"price": 2}]}

        assert jsonpath(data, "$.items[*].price") == [1, 2]
        assert jsonpath(data, "$.nothing") == []

    def test_containers_are_unwrapped(self):
        container = OrderedContainer({"a": {"b": 7}})

        assert jsonpath_first(container, "$.a.b") == 7

    def test_first_without_match(self):
        with pytest.raises(LookupError):
            jsonpath_first({}, "$.a")


class TestInTemplates:
    """The library is opt-in through the functions option."""

    def test_functions_in_template(self):
        template = Template(
            '{"date": "format_date(data.when, \'yyyy/MM/dd\')",'
            ' "prices": "jsonpath(data, \'$.items[*].price\')",'
            ' "first": "jsonpath_first(data, \'$.items[0].name\')",'
            ' "none": "jsonpath_first(data, \'$.nothing\')"}',
            functions=compute_functions(),
        )

        result = template.expand({"when": "2025-12-01", "items": [{"name": "a", "price": 1}, {"price": 2}]})

        assert result == '{"date":"2025/12/01","prices":[1,2],"first":"a"}'

    def test_jsonpath_over_fragment_result(self):
        template = Template(
            '{"names": "jsonpath(fragment(\'f\', data.people), \'$.people[*].name\')"}',
            fragments={"f": '{"people": "args[0]"}'},
            functions=compute_functions(),
        )

        assert template.expand({"people": [{"name": "Ada"}, {"name": "Grace"}]}) == '{"names":["Ada","Grace"]}'

    def test_library_not_declared_by_default(self):
        with pytest.raises(CompileError):
            Template('{"d": "format_date(data.when, \'yyyy\')"}')
