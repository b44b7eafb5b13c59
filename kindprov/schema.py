"""Attribute schemas for the kind_config block."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Optional, Union

from kindprov.toml_normalize import string_is_valid_toml, toml_equivalent


class ValueType(enum.Enum):
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    LIST = "list"
    MAP = "map"


@dataclass
class Schema:
    """Description of a single attribute."""

    type: ValueType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    description: str = ""
    max_items: int = 0
    default: Any = None
    elem: Optional[Union["Schema", "Resource"]] = None
    validate_func: Optional[Callable[[Any, str], tuple[list[str], list[str]]]] = None
    diff_suppress_func: Optional[Callable[[str, str, str], bool]] = None


@dataclass
class Resource:
    """A block of attributes together with its lifecycle operations."""

    schema: dict[str, Schema] = field(default_factory=dict)
    create: Optional[Callable[..., Any]] = None
    read: Optional[Callable[..., Any]] = None
    update: Optional[Callable[..., Any]] = None
    delete: Optional[Callable[..., Any]] = None
    timeouts: dict[str, timedelta] = field(default_factory=dict)

    def validate(self) -> None:
        """Check the schema for inconsistent definitions; raise ValueError."""
        self._validate(top_level=True)

    def _validate(self, top_level: bool) -> None:
        for name, s in self.schema.items():
            if s.required and s.optional:
                raise ValueError(f"{name}: required and optional cannot both be set")
            if s.required and s.computed:
                raise ValueError(f"{name}: required attributes cannot be computed")
            if s.required and s.default is not None:
                raise ValueError(f"{name}: required attributes cannot have a default")
            if not (s.required or s.optional or s.computed):
                raise ValueError(f"{name}: one of required, optional or computed must be set")
            if s.max_items and s.type is not ValueType.LIST:
                raise ValueError(f"{name}: max_items is only valid for lists")
            if s.type in (ValueType.LIST, ValueType.MAP):
                if s.elem is None:
                    raise ValueError(f"{name}: lists and maps need an element type")
            elif s.elem is not None:
                raise ValueError(f"{name}: element type given for a scalar")
            if isinstance(s.elem, Resource):
                if s.type is ValueType.MAP:
                    raise ValueError(f"{name}: maps cannot hold blocks")
                s.elem._validate(top_level=False)
            if (
                top_level
                and self.create is not None
                and self.update is None
                and not s.force_new
                and (s.required or s.optional)
            ):
                raise ValueError(f"{name}: must be force_new when the resource has no update")


def force_new_all(fields: dict[str, Schema]) -> dict[str, Schema]:
    """Mark every attribute, recursively, as force_new."""
    for s in fields.values():
        s.force_new = True
        if isinstance(s.elem, Resource):
            force_new_all(s.elem.schema)
    return fields


def containerd_patches_equivalent(key: str, old: str, new: str) -> bool:
    """Suppress diffs between patches that differ only in TOML formatting."""
    return toml_equivalent(old, new)


def _string() -> Schema:
    return Schema(type=ValueType.STRING)


def kind_config_fields() -> dict[str, Schema]:
    fields = {
        "kind": Schema(type=ValueType.STRING, required=True, force_new=True),
        "api_version": Schema(type=ValueType.STRING, required=True, force_new=True),
        "node": Schema(
            type=ValueType.LIST,
            optional=True,
            force_new=True,
            elem=Resource(schema=kind_config_node_fields()),
        ),
        "networking": Schema(
            type=ValueType.LIST,
            optional=True,
            force_new=True,
            max_items=1,
            elem=Resource(schema=kind_config_networking_fields()),
        ),
        "containerd_config_patches": Schema(
            type=ValueType.LIST,
            optional=True,
            elem=Schema(
                type=ValueType.STRING,
                validate_func=string_is_valid_toml,
                diff_suppress_func=containerd_patches_equivalent,
            ),
        ),
        "runtime_config": Schema(type=ValueType.MAP, optional=True, elem=_string()),
        "feature_gates": Schema(type=ValueType.MAP, optional=True, elem=_string()),
    }
    return force_new_all(fields)


def kind_config_node_fields() -> dict[str, Schema]:
    return {
        "role": Schema(type=ValueType.STRING, optional=True),
        "image": Schema(type=ValueType.STRING, optional=True),
        "extra_mounts": Schema(
            type=ValueType.LIST,
            optional=True,
            elem=Resource(schema=kind_config_node_mount_fields()),
        ),
        "extra_port_mappings": Schema(
            type=ValueType.LIST,
            optional=True,
            elem=Resource(schema=kind_config_node_extra_port_mappings_fields()),
        ),
        "labels": Schema(type=ValueType.MAP, optional=True, elem=_string()),
        "kubeadm_config_patches": Schema(type=ValueType.LIST, optional=True, elem=_string()),
    }


def kind_config_networking_fields() -> dict[str, Schema]:
    return {
        "ip_family": Schema(type=ValueType.STRING, optional=True),
        "api_server_address": Schema(
            type=ValueType.STRING,
            optional=True,
            description=(
                "WARNING: It is _strongly_ recommended that you keep this the default "
                "(127.0.0.1) for security reasons. However it is possible to change this."
            ),
        ),
        "api_server_port": Schema(
            type=ValueType.INT,
            optional=True,
            description=(
                "By default the API server listens on a random open port. You may choose "
                "a specific port but probably don't need to in most cases. Using a random "
                "port makes it easier to spin up multiple clusters."
            ),
        ),
        "pod_subnet": Schema(type=ValueType.STRING, optional=True),
        "service_subnet": Schema(type=ValueType.STRING, optional=True),
        "disable_default_cni": Schema(type=ValueType.BOOL, optional=True),
        "kube_proxy_mode": Schema(type=ValueType.STRING, optional=True),
        "dns_search": Schema(type=ValueType.LIST, optional=True, elem=_string()),
    }


def kind_config_node_mount_fields() -> dict[str, Schema]:
    return {
        "host_path": Schema(type=ValueType.STRING, optional=True),
        "container_path": Schema(type=ValueType.STRING, optional=True),
        "propagation": Schema(type=ValueType.STRING, optional=True),
        "read_only": Schema(type=ValueType.BOOL, optional=True),
        "selinux_relabel": Schema(type=ValueType.BOOL, optional=True),
    }


def kind_config_node_extra_port_mappings_fields() -> dict[str, Schema]:
    return {
        "container_port": Schema(type=ValueType.INT, optional=True),
        "host_port": Schema(type=ValueType.INT, optional=True),
        "listen_address": Schema(
            type=ValueType.STRING,
            optional=True,
            description="optional: set the bind address on the host, 0.0.0.0 is the current default",
        ),
        "protocol": Schema(
            type=ValueType.STRING,
            optional=True,
            description="optional: set the protocol to one of TCP, UDP, SCTP. TCP is the default",
        ),
    }