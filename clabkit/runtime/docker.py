"""Pure parts of the Docker runtime: filters, network options and container lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Optional

from clabkit.types.nodes import GenericContainer, GenericFilter, GenericMgmtIPs, MgmtNet, NodeConfig

RUNTIME_NAME = "docker"
SYSCTL_BASE = "/proc/sys"
DEFAULT_BRIDGE_NETWORK = "bridge"
DEFAULT_BRIDGE_INTERFACE = "docker0"
MTU_OPTION = "com.docker.network.driver.mtu"
BRIDGE_NAME_OPTION = "com.docker.network.bridge.name"
CONTAINERLAB_LABEL = "containerlab"
LLDP_GROUP_FWD_MASK = 16384
_SHORT_ID_LEN = 12


def build_filter_args(filters: Iterable[GenericFilter]) -> dict[str, list[str]]:
    """Turn generic filters into Docker filter arguments.

    The result maps a filter type (``label``, ``name``...) to its values,
    e.g. ``{"label": ["containerlab=lab1"]}``. An ``exists`` filter keeps
    only the field name. Duplicate values are dropped.
    """
    args: dict[str, list[str]] = {}
    for entry in filters:
        value = entry.field
        if entry.operator != "exists":
            value += entry.operator + entry.match
        values = args.setdefault(entry.filter_type, [])
        if value not in values:
            values.append(value)
    return args


def _mgmt_ips(settings: Mapping[str, Any]) -> GenericMgmtIPs:
    return GenericMgmtIPs(
        ipv4_addr=settings.get("IPAddress", "") or "",
        ipv4_plen=int(settings.get("IPPrefixLen", 0) or 0),
        ipv6_addr=settings.get("GlobalIPv6Address", "") or "",
        ipv6_plen=int(settings.get("GlobalIPv6PrefixLen", 0) or 0),
    )


def produce_generic_container_list(
    containers: Iterable[Mapping[str, Any]],
    networks: Optional[Iterable[Mapping[str, Any]]],
    mgmt_network: str,
) -> list[GenericContainer]:
    """Convert Docker container list entries into generic containers.

    ``containers`` are entries as returned by the Docker list API. When
    ``mgmt_network`` is empty, the first of ``networks`` the container is
    attached to supplies the management addresses.
    """
    network_list = list(networks) if networks is not None else None
    result = []
    for entry in containers:
        attached: Mapping[str, Any] = (entry.get("NetworkSettings") or {}).get("Networks") or {}
        container_id = entry.get("Id", "")
        container = GenericContainer(
            names=list(entry.get("Names") or []),
            id=container_id,
            short_id=container_id[:_SHORT_ID_LEN],
            image=entry.get("Image", ""),
            state=entry.get("State", ""),
            status=entry.get("Status", ""),
            labels=dict(entry.get("Labels") or {}),
            network_settings=GenericMgmtIPs(),
        )
        network_name = mgmt_network
        if not network_name and network_list is not None:
            network_name = next(
                (net.get("Name", "") for net in network_list if net.get("Name", "") in attached),
                "",
            )
        if network_name in attached:
            container.network_settings = _mgmt_ips(attached[network_name] or {})
        result.append(container)
    return result


def network_create_options(mgmt: MgmtNet) -> dict[str, Any]:
    """Return the Docker network-create body for the management network.

    IPv6 is enabled only when an IPv6 subnet is given; the bridge name
    option is set only when a bridge is named.
    """
    ipam_config = []
    enable_ipv6 = False
    if mgmt.ipv4_subnet:
        ipam_config.append({"Subnet": mgmt.ipv4_subnet})
    if mgmt.ipv6_subnet:
        ipam_config.append({"Subnet": mgmt.ipv6_subnet})
        enable_ipv6 = True

    options = {MTU_OPTION: mgmt.mtu}
    if mgmt.bridge:
        options[BRIDGE_NAME_OPTION] = mgmt.bridge

    return {
        "Name": mgmt.network,
        "CheckDuplicate": True,
        "Driver": "bridge",
        "EnableIPv6": enable_ipv6,
        "IPAM": {"Driver": "default", "Config": ipam_config},
        "Internal": False,
        "Attachable": False,
        "Labels": {CONTAINERLAB_LABEL: ""},
        "Options": options,
    }


def existing_bridge_name(
    network_name: str, network_id: str, options: Optional[Mapping[str, str]]
) -> str:
    """Return the Linux bridge behind an existing Docker network.

    The default ``bridge`` network uses ``docker0``; others use the bridge
    name option or ``br-`` followed by the first 12 characters of the id.
    Raises ValueError when the id is shorter than 12 characters.
    """
    if len(network_id) < _SHORT_ID_LEN:
        raise ValueError("could not get bridge ID")
    if network_name == DEFAULT_BRIDGE_NETWORK:
        return DEFAULT_BRIDGE_INTERFACE
    explicit = (options or {}).get(BRIDGE_NAME_OPTION, "")
    if explicit:
        return explicit
    return "br-" + network_id[:_SHORT_ID_LEN]


def endpoint_config(node: NodeConfig, mgmt_network: str) -> tuple[str, dict[str, Any]]:
    """Return the network mode and networking config for creating ``node``.

    Nodes in ``host`` mode use the host network and no endpoint settings;
    others join ``mgmt_network`` with their configured addresses.
    """
    if node.network_mode == "host":
        return "host", {}
    return mgmt_network, {
        "EndpointsConfig": {
            mgmt_network: {
                "IPAMConfig": {
                    "IPv4Address": node.mgmt_ipv4_address,
                    "IPv6Address": node.mgmt_ipv6_address,
                }
            }
        }
    }