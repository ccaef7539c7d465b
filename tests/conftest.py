"""Shared fixtures for template tests."""

from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


@pytest.fixture
def examples_dir():
    """Path to the bundled example templates."""
    return EXAMPLES_DIR


@pytest.fixture
def reference_data():
    """Input document used by most expansion tests."""
    return {
        "test": "avalue",
        "name": "a test name",
        "age": 40,
        "sub1": 88,
        "status": 2,
        "person": {
            "Name": "Bob",
            "Age": 22,
            "Address": {
                "Line1": "Here Street",
                "Line2": "There city",
            },
        },
        "list1": [1, 2, 3, 4, 5, 6, 7, 8, 9],
        "complexList": [
            {"name": "name1", "value": "value1", "deepList": [1, 2, 3, 4, 5]},
            {"name": "name2", "value": "value2", "deepList": [1, 2, 3, 4, 5]},
            {"name": "name3", "value": "value3", "deepList": [1, 2, 3, 4, 5]},
        ],
    }


@pytest.fixture
def reference_template():
    """Template touching every node kind."""
    return """{
        "test": "data.test",
        "sub1": "data.sub1 if 'sub1' in data else ref.sub1Default",
        "sub1.2": "data.doesnotexist",
        "sub2": {
            "name": "data.name",
            "age": 44
        },
        "sub3": [1, 2, 3, "data.age"],
        "sub4": [
            {"first": "data.age"},
            {"second": 3}
        ],
        "stringtest": "'lit'",
        "fragtest": "fragment('frag1') if ref.fragtest else ''",
        "fragtest2": "fragment('frag2', data) if ref.fragtest2 else ''"
    }"""
