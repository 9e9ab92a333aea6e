import pytest

from diaggate.engine_core import ParamSpec, ParameterResolver, parse_legacy_params
from diaggate.errors import ConfigurationError
from diaggate.store import MappingPropertyStore


@pytest.fixture
def resolver():
    return ParameterResolver()


def test_static_params_are_copied(resolver):
    static = {"%1": "a.dita"}
    result = resolver.resolve(static, [], MappingPropertyStore())
    assert dict(result) == {"%1": "a.dita"}
    static["%2"] = "late"
    assert "%2" not in result


def test_param_keys_are_prefixed(resolver):
    result = resolver.resolve(None, [ParamSpec(name="1", value="html5")], MappingPropertyStore())
    assert dict(result) == {"%1": "html5"}


def test_if_guard_includes_only_when_property_set(resolver):
    spec = ParamSpec(name="1", value="x", if_name="p")
    assert "%1" in resolver.resolve({}, [spec], MappingPropertyStore({"p": "1"}))
    assert "%1" not in resolver.resolve({}, [spec], MappingPropertyStore())


def test_unless_guard_includes_only_when_property_missing(resolver):
    spec = ParamSpec(name="1", value="x", unless_name="p")
    assert "%1" not in resolver.resolve({}, [spec], MappingPropertyStore({"p": "1"}))
    assert "%1" in resolver.resolve({}, [spec], MappingPropertyStore())


def test_last_write_wins(resolver):
    specs = [ParamSpec(name="1", value="first"), ParamSpec(name="1", value="second")]
    result = resolver.resolve({"%1": "static"}, specs, MappingPropertyStore())
    assert result["%1"] == "second"


def test_declaration_order_is_preserved(resolver):
    specs = [ParamSpec(name="b", value="2"), ParamSpec(name="a", value="1")]
    result = resolver.resolve({"z": "0"}, specs, MappingPropertyStore())
    assert list(result) == ["z", "%b", "%a"]


@pytest.mark.parametrize("spec", [ParamSpec(name="", value="x"), ParamSpec(name="1", value="")])
def test_incomplete_parameter_is_rejected(resolver, spec):
    with pytest.raises(ConfigurationError, match="incomplete parameter"):
        resolver.resolve({}, [spec], MappingPropertyStore())


def test_incomplete_parameter_is_rejected_even_when_guard_fails(resolver):
    spec = ParamSpec(name="", value="x", if_name="missing")
    with pytest.raises(ConfigurationError):
        resolver.resolve({}, [spec], MappingPropertyStore())


def test_invalid_spec_short_circuits_later_specs():
    seen = []

    class _Store:
        def has(self, name):
            seen.append(name)
            return True

        def get(self, name):
            return None

    specs = [
        ParamSpec(name="1", value="a", if_name="first"),
        ParamSpec(name="", value="b"),
        ParamSpec(name="3", value="c", if_name="third"),
    ]
    with pytest.raises(ConfigurationError):
        ParameterResolver().resolve({}, specs, _Store())
    assert seen == ["first"]


def test_resolved_parameters_are_read_only(resolver):
    result = resolver.resolve({}, [ParamSpec(name="1", value="a")], MappingPropertyStore())
    with pytest.raises(TypeError):
        result["%1"] = "b"


def test_parse_legacy_params():
    assert parse_legacy_params("%1=a.dita;%2=b=c;;") == {"%1": "a.dita", "%2": "b=c"}
    assert parse_legacy_params(None) == {}
    assert parse_legacy_params("") == {}


def test_parse_legacy_params_rejects_token_without_separator():
    with pytest.raises(ConfigurationError, match="malformed parameter"):
        parse_legacy_params("%1=a;oops")
