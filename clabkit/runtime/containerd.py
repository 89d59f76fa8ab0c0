"""Pure parts of the containerd runtime: filters, mounts, CNI config and status."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from clabkit.types.nodes import GenericFilter, GenericMgmtIPs, MgmtNet

RUNTIME_NAME = "containerd"
CONTAINERD_NAMESPACE = "clab"
CNI_CACHE = "/opt/cni/cache"
REQUIRED_CNI_BINARIES = ("tuning", "bridge", "host-local")

_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class Mount:
    """A bind mount of a host path into a container."""

    source: str
    destination: str
    options: list[str] = field(default_factory=lambda: ["rbind", "rprivate"])


@dataclass
class PortMapping:
    """A port mapping handed to the CNI portmap plugin."""

    host_port: int
    container_port: int
    protocol: str
    host_ip: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the mapping in the form the portmap plugin expects."""
        result: dict[str, Any] = {"hostPort": self.host_port}
        if self.host_ip:
            result["hostIP"] = self.host_ip
        result["containerPort"] = self.container_port
        result["protocol"] = self.protocol
        return result


def _atoi(value: str) -> int:
    if not _INT.fullmatch(value):
        raise ValueError(f"invalid integer: {value!r}")
    return int(value)


def default_bridge_name(mgmt: MgmtNet) -> str:
    """Return the bridge of ``mgmt``, or ``br-<network>`` (``br-clab``) when unset."""
    if mgmt.bridge:
        return mgmt.bridge
    return "br-" + (mgmt.network or "clab")


def build_filter_string(filters: list[GenericFilter]) -> str:
    """Build a containerd filter expression from label filters.

    Filters of other types are ignored.
    """
    result = ""
    delim = ","
    for counter, entry in enumerate(filters):
        is_exists = False
        operator = entry.operator
        if operator == "=":
            operator = "=="
        elif operator == "exists":
            operator = ""
            is_exists = True

        if counter + 1 == len(filters):
            delim = ""

        if entry.filter_type == "label":
            result += 'labels."' + entry.field + '"'
            if not is_exists:
                result += operator + '"' + entry.match + '"' + delim
    return result


def extract_ip_info_from_labels(labels: Mapping[str, str]) -> GenericMgmtIPs:
    """Read management addresses from the ``clab.ipv4.*``/``clab.ipv6.*`` labels.

    Raises ValueError when a netmask label is not an integer.
    """
    ipv4_mask = _atoi(labels["clab.ipv4.netmask"]) if "clab.ipv4.netmask" in labels else 0
    ipv6_mask = _atoi(labels["clab.ipv6.netmask"]) if "clab.ipv6.netmask" in labels else 0
    return GenericMgmtIPs(
        ipv4_addr=labels.get("clab.ipv4.addr", ""),
        ipv4_plen=ipv4_mask,
        ipv6_addr=labels.get("clab.ipv6.addr", ""),
        ipv6_plen=ipv6_mask,
    )


def cni_config(mgmt: MgmtNet) -> dict[str, Any]:
    """Return the CNI network configuration list for the management network.

    Raises ValueError when the MTU is not an integer.
    """
    mtu = _atoi(mgmt.mtu)
    return {
        "cniVersion": "0.4.0",
        "name": "clabmgmt",
        "plugins": [
            {
                "type": "bridge",
                "bridge": mgmt.bridge,
                "isDefaultGateway": True,
                "forceAddress": False,
                "ipMasq": True,
                "hairpinMode": True,
                "ipam": {
                    "type": "host-local",
                    "ranges": [
                        [{"subnet": mgmt.ipv4_subnet}],
                        [{"subnet": mgmt.ipv6_subnet}],
                    ],
                },
            },
            {"type": "tuning", "mtu": mtu, "capabilities": {"mac": True}},
            {"type": "portmap", "capabilities": {"portMappings": True}},
        ],
    }


def parse_mounts(binds: Iterable[str]) -> list[Mount]:
    """Turn ``src:dst[:opts]`` bind strings into mounts.

    Options after the second colon are comma separated and added to the
    default ``rbind``/``rprivate``. Raises ValueError for a bind without
    a destination.
    """
    mounts = []
    for bind in binds:
        parts = bind.split(":")
        if len(parts) < 2:
            raise ValueError(f"invalid bind {bind!r}: expected source:destination")
        mount = Mount(source=parts[0], destination=parts[1])
        if len(parts) == 3:
            mount.options.extend(parts[2].split(","))
        mounts.append(mount)
    return mounts


def port_mappings(port_bindings: Mapping[str, Iterable[Any]]) -> list[PortMapping]:
    """Build portmap entries from ``"port/proto"`` keys and their host bindings.

    Each binding needs a ``host_port`` attribute. Raises ValueError when a
    host port is not an integer.
    """
    mappings = []
    for container, bindings in port_bindings.items():
        port, _, proto = container.partition("/")
        container_port = _atoi(port.split("-", 1)[0])
        for binding in bindings:
            mappings.append(
                PortMapping(
                    host_port=_atoi(binding.host_port),
                    container_port=container_port,
                    protocol=proto or "tcp",
                )
            )
    return mappings


def _human_duration(d: timedelta) -> str:
    seconds = int(d.total_seconds())
    if seconds < 1:
        return "Less than a second"
    if seconds == 1:
        return "1 second"
    if seconds < 60:
        return f"{seconds} seconds"
    minutes = seconds // 60
    if minutes == 1:
        return "About a minute"
    if minutes < 60:
        return f"{minutes} minutes"
    hours = int(d.total_seconds() / 3600 + 0.5)
    if hours == 1:
        return "About an hour"
    if hours < 48:
        return f"{hours} hours"
    if hours < 24 * 7 * 2:
        return f"{hours // 24} days"
    if hours < 24 * 30 * 2:
        return f"{hours // 24 // 7} weeks"
    if hours < 24 * 365 * 2:
        return f"{hours // 24 // 30} months"
    return f"{int(d.total_seconds() / 3600) // 24 // 365} years"


def task_status_text(status: str, exit_status: int, exit_age: timedelta) -> str:
    """Return the human status of a task, e.g. ``Up`` or ``Exited (0) 5 seconds ago``."""
    if status == "stopped":
        return f"Exited ({exit_status}) {_human_duration(exit_age)} ago"
    if status == "running":
        return "Up"
    return status.title()