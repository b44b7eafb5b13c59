import pytest

from kindprov.schema import (
    Resource,
    Schema,
    ValueType,
    containerd_patches_equivalent,
    force_new_all,
    kind_config_fields,
    kind_config_networking_fields,
    kind_config_node_fields,
)


def _all_schemas(fields):
    for s in fields.values():
        yield s
        if isinstance(s.elem, Resource):
            yield from _all_schemas(s.elem.schema)


def test_kind_config_fields_are_all_force_new():
    fields = kind_config_fields()
    assert all(s.force_new for s in _all_schemas(fields))
    assert fields["kind"].required and fields["api_version"].required


def test_node_fields_not_force_new_alone():
    assert not any(s.force_new for s in kind_config_node_fields().values())


def test_force_new_all_recurses():
    fields = {"node": Schema(type=ValueType.LIST, optional=True,
                             elem=Resource(schema=kind_config_node_fields()))}
    result = force_new_all(fields)
    assert result is fields
    assert result["node"].elem.schema["labels"].force_new


def test_networking_is_single_item():
    assert kind_config_fields()["networking"].max_items == 1
    assert kind_config_networking_fields()["api_server_port"].type is ValueType.INT


def test_kind_config_resource_validates():
    res = Resource(schema=kind_config_fields())
    res.validate()
    assert set(res.schema) >= {"kind", "node", "containerd_config_patches"}


def test_containerd_patch_validation_and_suppress():
    elem = kind_config_fields()["containerd_config_patches"].elem
    assert elem.validate_func("a = 1", "k") == ([], [])
    assert len(elem.validate_func("a = [\n", "k")[1]) == 1
    assert containerd_patches_equivalent("k", "[a]\nb = 1", "[a]\n  b = 1\n")
    assert not containerd_patches_equivalent("k", "b = 1", "b = 2")


@pytest.mark.parametrize(
    "bad",
    [
        Schema(type=ValueType.STRING, required=True, optional=True),
        Schema(type=ValueType.STRING, required=True, computed=True),
        Schema(type=ValueType.STRING, optional=True, max_items=1),
        Schema(type=ValueType.LIST, optional=True),
        Schema(type=ValueType.STRING),
    ],
)
def test_invalid_schema_rejected(bad):
    with pytest.raises(ValueError):
        Resource(schema={"x": bad}).validate()


def test_create_without_update_requires_force_new():
    res = Resource(schema={"x": Schema(type=ValueType.STRING, optional=True)},
                   create=lambda *a: None)
    with pytest.raises(ValueError):
        res.validate()