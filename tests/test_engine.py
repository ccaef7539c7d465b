"""Tests for expression compilation and evaluation."""

import pytest
from simpleeval import AttributeDoesNotExist

from jsonexpand.exceptions import ExpressionCompileError, MissingKeyError
from jsonexpand.template import BASE_FUNCTIONS, Environment, Outcome


@pytest.fixture
def environment():
    return Environment(variables={"data", "ref"}, functions=BASE_FUNCTIONS)


def evaluate(environment, text, context=None):
    program = environment.compile(text)
    return environment.activate(context or {}).evaluate(program)


class TestCompile:

    def test_program_keeps_source(self, environment):
        assert environment.compile("data.name").source == "data.name"

    @pytest.mark.parametrize("text", ["1 +", "", "x = 1", "'unterminated"])
    def test_syntax_errors(self, environment, text):
        with pytest.raises(ExpressionCompileError):
            environment.compile(text)

    def test_undeclared_function(self, environment):
        with pytest.raises(ExpressionCompileError) as excinfo:
            environment.compile("nope(1)")

        assert "undeclared function 'nope'" in str(excinfo.value)

    def test_reserved_member_must_be_declared(self):
        environment = Environment(variables={"args"}, reserved_members={"fragment"})

        with pytest.raises(ExpressionCompileError) as excinfo:
            environment.compile("args[0].fragment('b')")

        assert "undeclared member function 'fragment'" in str(excinfo.value)

        extended = environment.extend()
        extended.declare_member_function("fragment", lambda items, name: items)
        assert extended.compile("args[0].fragment('b')") is not None

    def test_other_member_calls_compile(self):
        environment = Environment(variables={"data"}, reserved_members={"fragment"})

        assert environment.compile("data.name.upper()") is not None

    def test_undeclared_variable_compiles(self, environment):
        assert environment.compile("missing") is not None

    def test_declarations(self):
        environment = Environment()
        environment.declare_variable("x")
        environment.declare_function("double", lambda v: v * 2)
        environment.declare_member_function("twice", lambda v: v + v)

        assert evaluate(environment, "double(x)", {"x": 2}).value == 4
        assert evaluate(environment, "x.twice()", {"x": "ab"}).value == "abab"

    def test_extend_does_not_modify_parent(self, environment):
        extended = environment.extend(variables={"args"}, functions={"f": lambda: 1})

        assert "args" in extended.variables
        assert "args" not in environment.variables
        assert "f" not in environment.functions
        assert extended.compile("f()") is not None


class TestEvaluate:

    def test_value(self, environment):
        result = evaluate(environment, "data.a + 1", {"data": {"a": 1}})

        assert result.outcome is Outcome.VALUE
        assert result.ok
        assert result.value == 2

    def test_remove(self, environment):
        result = evaluate(environment, "remove_property()")

        assert result.outcome is Outcome.REMOVE
        assert result.error is None

    def test_remove_inside_larger_expression(self, environment):
        result = evaluate(environment, "[1, remove_property()]")

        assert result.outcome is Outcome.REMOVE

    def test_missing_attribute(self, environment):
        result = evaluate(environment, "data.nope", {"data": {}})

        assert result.outcome is Outcome.MISSING_KEY
        assert isinstance(result.error, MissingKeyError)

    def test_missing_subscript(self, environment):
        result = evaluate(environment, "data['nope']", {"data": {}})

        assert result.outcome is Outcome.MISSING_KEY

    def test_undefined_name_is_a_failure(self, environment):
        result = evaluate(environment, "missing")

        assert result.outcome is Outcome.FAILURE

    def test_runtime_error_is_a_failure(self, environment):
        result = evaluate(environment, "1 / 0")

        assert result.outcome is Outcome.FAILURE
        assert isinstance(result.error, ZeroDivisionError)

    def test_index_error_is_a_failure(self, environment):
        result = evaluate(environment, "data[5]", {"data": [1]})

        assert result.outcome is Outcome.FAILURE

    def test_string_methods_still_work(self, environment):
        result = evaluate(environment, "data.name.upper()", {"data": {"name": "bob"}})

        assert result.value == "BOB"

    def test_unknown_method_is_a_failure(self, environment):
        result = evaluate(environment, "data.name.nope()", {"data": {"name": "bob"}})

        assert result.outcome is Outcome.FAILURE
        assert isinstance(result.error, AttributeDoesNotExist)

    def test_private_attributes_unavailable(self, environment):
        result = evaluate(environment, "data.name.__class__", {"data": {"name": "bob"}})

        assert result.outcome is Outcome.FAILURE

    def test_attribute_receiver_evaluated_once(self):
        calls = []

        def tick():
            calls.append(1)
            return 5

        environment = Environment(functions={"tick": tick})

        assert evaluate(environment, "tick().bit_length()").value == 3
        assert evaluate(environment, "tick().real.real").value == 5
        assert len(calls) == 2

    def test_conditional_and_comprehension(self, environment):
        context = {"data": {"items": [1, 2, 3]}, "ref": {"flag": True}}

        assert evaluate(environment, "[i * 2 for i in data.items]", context).value == [2, 4, 6]
        assert evaluate(environment, "'on' if ref.flag else 'off'", context).value == "on"
        assert evaluate(environment, "'items' in data", context).value is True
