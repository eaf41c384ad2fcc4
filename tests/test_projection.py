from slash_events.projection import ValueKind, classify, flatten, project, project_arguments
from slash_events.scope import Scope


def test_classify_variants():
    assert classify(None) is ValueKind.NULL
    assert classify("text") is ValueKind.SCALAR
    assert classify(b"raw") is ValueKind.SCALAR
    assert classify(3.5) is ValueKind.SCALAR
    assert classify({"a": 1}) is ValueKind.KEYED
    assert classify([1, 2]) is ValueKind.ORDERED
    assert classify((1, 2)) is ValueKind.ORDERED


def test_event_arguments_are_projected_by_path():
    scope = Scope()
    payload = {"a": 1, "b": [10, 20]}

    project_arguments(scope, ["hello", payload])

    assert scope.get_variable("arg0") == "hello"
    assert scope.get_variable("arg1") == payload
    assert scope.get_variable("arg1.a") == 1
    assert scope.get_variable("arg1.b.0") == 10
    assert scope.get_variable("arg1.b.1") == 20


def test_none_arguments_and_members_bind_nothing():
    scope = Scope()

    project_arguments(scope, [None, {"keep": 0, "skip": None}])

    assert not scope.has_variable("arg0")
    assert scope.get_variable("arg1.keep") == 0
    assert not scope.has_variable("arg1.skip")


def test_nested_arrays_of_objects_and_objects_of_arrays():
    scope = Scope()
    value = {"rows": [{"id": 1, "tags": ["x", "y"]}, {"id": 2, "tags": []}], "grid": [[1, 2], [3]]}

    project(scope, value, "arg0")

    assert scope.get_variable("arg0.rows.0.id") == 1
    assert scope.get_variable("arg0.rows.0.tags.1") == "y"
    assert scope.get_variable("arg0.rows.1.id") == 2
    assert scope.get_variable("arg0.grid.1.0") == 3
    assert not scope.has_variable("arg0.rows.1.tags")


def test_deep_nesting_is_not_limited_by_recursion():
    value = current = {}
    for _ in range(5000):
        current["n"] = {}
        current = current["n"]
    current["leaf"] = True

    paths = dict(flatten(value, "arg0"))

    assert len(paths) == 1
    assert next(iter(paths.values())) is True


def test_stringify_variant():
    scope = Scope()

    project_arguments(scope, [42, {"ok": True, "ratio": 0.5}], stringify=True)

    assert scope.get_variable("arg0") == "42"
    assert scope.get_variable("arg1.ok") == "true"
    assert scope.get_variable("arg1.ratio") == "0.5"


def test_strings_are_not_split_into_characters():
    scope = Scope()

    project(scope, {"name": "abc"}, "arg0")

    assert scope.get_variable("arg0.name") == "abc"
    assert not scope.has_variable("arg0.name.0")


def test_stringify_binds_whole_collections_as_json_text():
    scope = Scope()

    project_arguments(scope, [{"a": 1, "tags": ["x"]}, [True, None]], stringify=True)

    assert scope.get_variable("arg0") == '{"a": 1, "tags": ["x"]}'
    assert scope.get_variable("arg0.a") == "1"
    assert scope.get_variable("arg0.tags.0") == "x"
    assert scope.get_variable("arg1") == "[true, null]"
    assert scope.get_variable("arg1.0") == "true"
    assert all(isinstance(value, str) for value in scope.variables.values())
