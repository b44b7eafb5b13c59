# kindprov

`kindprov` works with the configuration of local Kubernetes clusters made
with kind. It turns a nested, declarative description of a cluster into
kind's `kind.x-k8s.io/v1alpha4` configuration, describes the attributes such
a description may hold, and checks the containerd TOML patches it carries.

## Modules

- `kindprov.config` — the configuration model (`Cluster`, `Node`,
  `Networking`, `Mount`, `PortMapping`) and the `flatten_kind_config*`
  functions that build it from a description.
- `kindprov.schema` — attribute schemas (`Schema`, `Resource`, `ValueType`)
  for the `kind_config` block and its nested blocks.
- `kindprov.toml_normalize` — `normalize_toml`, `toml_equivalent`,
  `string_is_valid_toml` and `InvalidTomlError`.

## Building a kind configuration

```python
from kindprov.config import flatten_kind_config

cluster = flatten_kind_config({
    "kind": "Cluster",
    "api_version": "kind.x-k8s.io/v1alpha4",
    "node": [
        {"role": "control-plane", "labels": {"name": "node0"}},
        {"role": "worker"},
    ],
    "networking": [{"api_server_address": "127.0.0.1", "api_server_port": 6443}],
    "runtime_config": {"api_alpha": "false"},
})

print(cluster.to_yaml())
```

`Cluster.to_dict()` returns the same configuration as a dictionary with
kind's own field names (`apiVersion`, `nodes`, `extraPortMappings`,
`containerdConfigPatches`, ...); empty fields are left out, except that
`dnsSearch` is kept whenever it was given, even as an empty list.
`Cluster.to_yaml()` dumps that dictionary as YAML.

Rules the flattening follows:

- `kind` and `api_version` must be present; a missing one raises `KeyError`.
- Only the first and only `networking` entry is used; a list of any other
  length leaves the default networking in place.
- Keys of `runtime_config` have their underscores replaced by slashes
  (`api_alpha` becomes `api/alpha`).
- A feature gate is `True` only when its value is `"true"` in any case.
- Roles (`control-plane`, `worker`), IP families (`ipv4`, `ipv6`, `dual`),
  kube-proxy modes (`iptables`, `ipvs`, `none`), mount propagation
  (`None`, `HostToContainer`, `Bidirectional`) and port protocols
  (`TCP`, `UDP`, `SCTP`) outside those values are left unset.
- Node labels whose values are not strings are dropped.

The single-block functions `flatten_kind_config_node`,
`flatten_kind_config_networking`, `flatten_kind_config_extra_mount` and
`flatten_kind_config_extra_port_mapping` can be used on their own.

## Containerd patches and TOML

Containerd config patches must be valid TOML. `normalize_toml` rewrites a
snippet in a canonical layout: keys sorted, plain values before tables, and
each nested table indented by two spaces.

```python
from kindprov.toml_normalize import normalize_toml, toml_equivalent

print(normalize_toml('name = "test"\n[fruit.apple]\n[animal]\n[fruit]\n'))
# name = "test"
#
# [animal]
#
# [fruit]
#
#   [fruit.apple]
```

- `normalize_toml` returns `""` for `None` or an empty string and raises
  `InvalidTomlError` (a `ValueError`, with the input in `.source`) for input
  that does not parse.
- `toml_equivalent(old, new)` tells whether two snippets differ only in
  layout; input that does not parse is compared as it stands.
- `string_is_valid_toml(value, key)` returns `(warnings, errors)`: an error
  when the value is not a string or not valid TOML, named after `key`.

## Attribute schemas

`kind_config_fields()` returns the schema of the `kind_config` block: the
required `kind` and `api_version`, the `node` list, at most one
`networking` block, `containerd_config_patches` (validated as TOML, with
layout-only differences suppressed by `containerd_patches_equivalent`),
and the `runtime_config` and `feature_gates` maps. Every attribute in it,
nested ones included, is marked `force_new` by `force_new_all`.
`kind_config_node_fields()`, `kind_config_networking_fields()`,
`kind_config_node_mount_fields()` and
`kind_config_node_extra_port_mappings_fields()` return the nested blocks.

```python
from kindprov.schema import Resource, kind_config_fields

Resource(schema=kind_config_fields()).validate()
```

`Resource.validate()` raises `ValueError` for an inconsistent schema, for
example an attribute that is both required and computed, a list without an
element type, or, in a resource that can be created but not updated, a
settable attribute that is not `force_new`.

## What it does not do

The package does not create, read or delete clusters, does not run kind,
and does not read kubeconfigs or extract endpoints and certificates from
them. It offers no command-line program. It builds and checks
configurations; putting them to use is left to the caller.