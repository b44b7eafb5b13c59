"""The kind cluster configuration model (kind.x-k8s.io/v1alpha4)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

CONTROL_PLANE_ROLE = "control-plane"
WORKER_ROLE = "worker"
_ROLES = {CONTROL_PLANE_ROLE, WORKER_ROLE}
_IP_FAMILIES = {"ipv4", "ipv6", "dual"}
_PROXY_MODES = {"iptables", "ipvs", "none"}
_PROPAGATIONS = {"None", "HostToContainer", "Bidirectional"}
_PROTOCOLS = {"TCP", "UDP", "SCTP"}


def _prune(mapping: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in mapping.items() if v not in (None, "", 0, False, [], {})}


@dataclass
class Mount:
    container_path: str = ""
    host_path: str = ""
    read_only: bool = False
    selinux_relabel: bool = False
    propagation: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _prune({
            "containerPath": self.container_path,
            "hostPath": self.host_path,
            "readOnly": self.read_only,
            "selinuxRelabel": self.selinux_relabel,
            "propagation": self.propagation,
        })


@dataclass
class PortMapping:
    container_port: int = 0
    host_port: int = 0
    listen_address: str = ""
    protocol: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _prune({
            "containerPort": self.container_port,
            "hostPort": self.host_port,
            "listenAddress": self.listen_address,
            "protocol": self.protocol,
        })


@dataclass
class Node:
    role: str = ""
    image: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    extra_mounts: list[Mount] = field(default_factory=list)
    extra_port_mappings: list[PortMapping] = field(default_factory=list)
    kubeadm_config_patches: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _prune({
            "role": self.role,
            "image": self.image,
            "labels": dict(self.labels),
            "extraMounts": [m.to_dict() for m in self.extra_mounts],
            "extraPortMappings": [p.to_dict() for p in self.extra_port_mappings],
            "kubeadmConfigPatches": list(self.kubeadm_config_patches),
        })


@dataclass
class Networking:
    ip_family: str = ""
    api_server_port: int = 0
    api_server_address: str = ""
    pod_subnet: str = ""
    service_subnet: str = ""
    disable_default_cni: bool = False
    kube_proxy_mode: str = ""
    dns_search: Optional[list[str]] = None

    def to_dict(self) -> dict[str, Any]:
        data = _prune({
            "ipFamily": self.ip_family,
            "apiServerPort": self.api_server_port,
            "apiServerAddress": self.api_server_address,
            "podSubnet": self.pod_subnet,
            "serviceSubnet": self.service_subnet,
            "disableDefaultCNI": self.disable_default_cni,
            "kubeProxyMode": self.kube_proxy_mode,
        })
        if self.dns_search is not None:
            data["dnsSearch"] = list(self.dns_search)
        return data


@dataclass
class Cluster:
    kind: str = ""
    api_version: str = ""
    nodes: list[Node] = field(default_factory=list)
    networking: Networking = field(default_factory=Networking)
    feature_gates: dict[str, bool] = field(default_factory=dict)
    runtime_config: dict[str, str] = field(default_factory=dict)
    containerd_config_patches: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration with kind's own field names."""
        data: dict[str, Any] = _prune({"kind": self.kind, "apiVersion": self.api_version})
        data.update(_prune({
            "nodes": [n.to_dict() for n in self.nodes],
            "networking": self.networking.to_dict(),
            "featureGates": dict(self.feature_gates),
            "runtimeConfig": dict(self.runtime_config),
            "containerdConfigPatches": list(self.containerd_config_patches),
        }))
        return data

    def to_yaml(self) -> str:
        """Return the configuration as a kind config YAML document."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def _text(d: dict[str, Any], key: str) -> str:
    value = d.get(key)
    return value if isinstance(value, str) else ""


def _choice(d: dict[str, Any], key: str, allowed: set[str]) -> str:
    value = _text(d, key)
    return value if value in allowed else ""


def flatten_kind_config(d: dict[str, Any]) -> Cluster:
    """Build a Cluster from a kind_config block; kind and api_version are required."""
    cluster = Cluster(kind=d["kind"], api_version=d["api_version"])
    cluster.nodes = [flatten_kind_config_node(n) for n in d.get("node") or []]
    networking = d.get("networking")
    if networking and len(networking) == 1 and networking[0] is not None:
        cluster.networking = flatten_kind_config_networking(networking[0])
    cluster.containerd_config_patches = list(d.get("containerd_config_patches") or [])
    runtime_config = d.get("runtime_config")
    if runtime_config is not None:
        # HCL keys cannot hold a slash, so underscores stand for one.
        cluster.runtime_config = {k.replace("_", "/"): v for k, v in runtime_config.items()}
    feature_gates = d.get("feature_gates")
    if feature_gates is not None:
        cluster.feature_gates = {k: v.lower() == "true" for k, v in feature_gates.items()}
    return cluster


def flatten_kind_config_node(d: dict[str, Any]) -> Node:
    labels = d.get("labels") or {}
    return Node(
        role=_choice(d, "role", _ROLES),
        image=_text(d, "image"),
        extra_mounts=[flatten_kind_config_extra_mount(m) for m in d.get("extra_mounts") or []],
        labels={k: v for k, v in labels.items() if isinstance(v, str)},
        extra_port_mappings=[
            flatten_kind_config_extra_port_mapping(m) for m in d.get("extra_port_mappings") or []
        ],
        kubeadm_config_patches=list(d.get("kubeadm_config_patches") or []),
    )


def flatten_kind_config_networking(d: dict[str, Any]) -> Networking:
    dns_search = d.get("dns_search")
    return Networking(
        api_server_address=_text(d, "api_server_address"),
        api_server_port=int(d.get("api_server_port") or 0),
        disable_default_cni=bool(d.get("disable_default_cni") or False),
        ip_family=_choice(d, "ip_family", _IP_FAMILIES),
        kube_proxy_mode=_choice(d, "kube_proxy_mode", _PROXY_MODES),
        pod_subnet=_text(d, "pod_subnet"),
        service_subnet=_text(d, "service_subnet"),
        dns_search=list(dns_search) if dns_search is not None else None,
    )


def flatten_kind_config_extra_mount(d: dict[str, Any]) -> Mount:
    return Mount(
        container_path=_text(d, "container_path"),
        host_path=_text(d, "host_path"),
        propagation=_choice(d, "propagation", _PROPAGATIONS),
        read_only=bool(d.get("read_only") or False),
        selinux_relabel=bool(d.get("selinux_relabel") or False),
    )


def flatten_kind_config_extra_port_mapping(d: dict[str, Any]) -> PortMapping:
    return PortMapping(
        container_port=int(d.get("container_port") or 0),
        host_port=int(d.get("host_port") or 0),
        listen_address=_text(d, "listen_address"),
        protocol=_choice(d, "protocol", _PROTOCOLS),
    )