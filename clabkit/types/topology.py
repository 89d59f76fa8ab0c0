"""Lab topology and the rules that resolve a node's settings.

A node setting comes from the node itself, then from its kind, then from
the topology defaults, whichever is set first. Environment variables,
labels and configuration variables are merged across the three levels.
"""

from __future__ import annotations

import ipaddress
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from clabkit.types.definitions import ConfigDispatcher, Extras, NodeDefinition
from clabkit.utils.env import merge_maps, merge_string_maps

_VALID_PROTOCOLS = frozenset({"tcp", "udp", "sctp"})
_UINT = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class PortBinding:
    """A host address and port that a container port is published on."""

    host_ip: str = ""
    host_port: str = ""


@dataclass
class LinkConfig:
    """A link as written in the topology file."""

    endpoints: list[str] = field(default_factory=list)
    labels: Optional[dict[str, str]] = None
    vars: Optional[dict[str, Any]] = None


def _split_parts(raw: str) -> tuple[str, str, str]:
    parts = raw.split(":")
    container = parts[-1]
    if len(parts) == 1:
        return "", "", container
    if len(parts) == 2:
        return "", parts[0], container
    if len(parts) == 3:
        return parts[0], parts[1], container
    return ":".join(parts[:-2]), parts[-2], container


def _split_proto_port(raw: str) -> tuple[str, str]:
    parts = raw.split("/")
    if not raw or not parts[0]:
        return "", ""
    if len(parts) == 1:
        return "tcp", raw
    if not parts[1]:
        return "tcp", parts[0]
    return parts[1], parts[0]


def _parse_port(value: str) -> int:
    if not _UINT.fullmatch(value) or int(value) > 0xFFFF:
        raise ValueError(f"invalid port number: {value!r}")
    return int(value)


def _parse_port_range(ports: str) -> tuple[int, int]:
    if not ports:
        raise ValueError("empty string specified for ports")
    if "-" not in ports:
        port = _parse_port(ports)
        return port, port
    parts = ports.split("-")
    start = _parse_port(parts[0])
    end = _parse_port(parts[1])
    if end < start:
        raise ValueError(f"invalid range specified for port: {ports}")
    return start, end


def _parse_port_spec(raw: str) -> list[tuple[str, PortBinding]]:
    ip, host_port, container_port = _split_parts(raw)
    proto, container_port = _split_proto_port(container_port)

    if ip.startswith("["):
        if not ip.endswith("]"):
            raise ValueError(f"Invalid ip address {ip}")
        ip = ip[1:-1]
    if ip:
        try:
            ipaddress.ip_address(ip)
        except ValueError:
            raise ValueError(f"invalid IP address: {ip}") from None

    if not container_port:
        raise ValueError(f"no port specified: {raw}<empty>")
    try:
        start, end = _parse_port_range(container_port)
    except ValueError:
        raise ValueError(f"invalid containerPort: {container_port}") from None

    start_host = end_host = 0
    if host_port:
        try:
            start_host, end_host = _parse_port_range(host_port)
        except ValueError:
            raise ValueError(f"invalid hostPort: {host_port}") from None

    if host_port and (end - start) != (end_host - start_host) and end != start:
        raise ValueError(
            "invalid ranges specified for container and host Ports: "
            f"{container_port} and {host_port}"
        )

    proto = proto.lower()
    if proto not in _VALID_PROTOCOLS:
        raise ValueError(f"invalid proto: {proto}")

    mappings = []
    for offset in range(end - start + 1):
        host = str(start_host + offset) if host_port else host_port
        if start == end and start_host != end_host:
            host = f"{host}-{end_host}"
        mappings.append((f"{start + offset}/{proto}", PortBinding(host_ip=ip, host_port=host)))
    return mappings


def parse_port_specs(specs: list[str]) -> tuple[set[str], dict[str, list[PortBinding]]]:
    """Parse port specs such as ``[ip:]hostPort:containerPort[/proto]``.

    Returns the exposed ports (``"8080/tcp"`` style) and their host
    bindings. Raises ValueError on a malformed spec.
    """
    exposed: set[str] = set()
    bindings: dict[str, list[PortBinding]] = {}
    for raw in specs:
        for port, binding in _parse_port_spec(raw):
            exposed.add(port)
            bindings.setdefault(port, []).append(binding)
    return exposed, bindings


def resolve_path(p: str) -> str:
    """Expand a leading ``~`` to the home directory, or make the path absolute."""
    if not p:
        return ""
    if p.startswith("~"):
        if p != "~" and not p.startswith(("~/", "~" + os.sep)):
            raise ValueError("cannot expand user-specific home dir")
        return os.path.expanduser(p)
    return os.path.abspath(p)


def _value(definition: Optional[NodeDefinition], attr: str) -> Any:
    if definition is None:
        return None
    return getattr(definition, attr)


@dataclass
class Topology:
    """A lab topology: defaults, kinds, nodes and links."""

    defaults: Optional[NodeDefinition] = field(default_factory=NodeDefinition)
    kinds: Optional[dict[str, Optional[NodeDefinition]]] = field(default_factory=dict)
    nodes: Optional[dict[str, Optional[NodeDefinition]]] = field(default_factory=dict)
    links: list[LinkConfig] = field(default_factory=list)

    def get_defaults(self) -> NodeDefinition:
        """Return the defaults, or an empty definition when none are set."""
        return self.defaults if self.defaults is not None else NodeDefinition()

    def get_kind(self, kind: str) -> NodeDefinition:
        """Return the definition of ``kind``, or an empty one when it is unknown."""
        definition = (self.kinds or {}).get(kind)
        return definition if definition is not None else NodeDefinition()

    def get_kinds(self) -> dict[str, Optional[NodeDefinition]]:
        """Return all kind definitions."""
        return self.kinds if self.kinds is not None else {}

    def _node(self, name: str) -> tuple[bool, Optional[NodeDefinition]]:
        nodes = self.nodes or {}
        if name in nodes:
            return True, nodes[name]
        return False, None

    def _cascade(self, name: str, attr: str, empty: Any) -> Any:
        found, node = self._node(name)
        if not found:
            return empty
        node_value = _value(node, attr)
        if node_value:
            return node_value
        kind_value = getattr(self.get_kind(self.get_node_kind(name)), attr)
        if kind_value:
            return kind_value
        default_value = getattr(self.get_defaults(), attr)
        return default_value if default_value is not None else empty

    def get_node_kind(self, name: str) -> str:
        """Return the node's kind, falling back to the default kind."""
        found, node = self._node(name)
        if not found:
            return ""
        return _value(node, "kind") or self.get_defaults().kind

    def get_node_binds(self, name: str) -> Optional[list[str]]:
        """Return the bind mounts of the first level that defines any."""
        found, _ = self._node(name)
        if not found:
            return None
        return self._cascade(name, "binds", None)

    def get_node_ports(self, name: str) -> tuple[set[str], dict[str, list[PortBinding]]]:
        """Return the parsed ports of the first level that defines any."""
        found, node = self._node(name)
        if found:
            for specs in (
                _value(node, "ports"),
                self.get_kind(self.get_node_kind(name)).ports,
                self.get_defaults().ports,
            ):
                if specs:
                    return parse_port_specs(specs)
        return set(), {}

    def get_node_env(self, name: str) -> Optional[dict[str, str]]:
        """Return defaults, kind and node environment merged, node winning."""
        found, node = self._node(name)
        if not found:
            return None
        return merge_string_maps(
            merge_string_maps(
                self.get_defaults().env, self.get_kind(self.get_node_kind(name)).env
            ),
            _value(node, "env"),
        )

    def get_node_publish(self, name: str) -> Optional[list[str]]:
        """Return the ports to publish of the first level that defines any."""
        found, node = self._node(name)
        if not found:
            return None
        node_publish = _value(node, "publish")
        if node_publish:
            return node_publish
        kind_def = (self.kinds or {}).get(_value(node, "kind") or "")
        if kind_def is not None and kind_def.publish:
            return kind_def.publish
        return _value(self.defaults, "publish")

    def get_node_labels(self, name: str) -> Optional[dict[str, str]]:
        """Return defaults, kind and node labels merged, node winning."""
        found, node = self._node(name)
        if not found:
            return None
        return merge_string_maps(
            _value(self.defaults, "labels"),
            self.get_kind(self.get_node_kind(name)).labels,
            _value(node, "labels"),
        )

    def get_node_config_dispatcher(self, name: str) -> Optional[ConfigDispatcher]:
        """Return a dispatcher whose variables merge defaults, kind and node."""
        found, node = self._node(name)
        if not found:
            return None

        def vars_of(definition: Optional[NodeDefinition]) -> Optional[dict[str, Any]]:
            dispatcher = _value(definition, "config")
            return dispatcher.get_vars() if dispatcher is not None else None

        merged = merge_maps(
            vars_of(self.defaults),
            vars_of(self.get_kind(self.get_node_kind(name))),
            vars_of(node),
        )
        return ConfigDispatcher(vars=merged)

    def _existing_path(self, name: str, attr: str) -> str:
        path = self._cascade(name, attr, "")
        if not path:
            return path
        path = resolve_path(path)
        os.stat(path)
        return path

    def get_node_startup_config(self, name: str) -> str:
        """Return the absolute path of the node's startup config, or ``""``.

        Raises FileNotFoundError when the file does not exist.
        """
        return self._existing_path(name, "startup_config")

    def get_node_startup_delay(self, name: str) -> int:
        """Return the startup delay in seconds."""
        return self._cascade(name, "startup_delay", 0)

    def get_node_enforce_startup_config(self, name: str) -> bool:
        """Return True if any level enforces the startup config."""
        return bool(self._cascade(name, "enforce_startup_config", False))

    def get_node_license(self, name: str) -> str:
        """Return the absolute path of the node's license, or ``""``.

        Raises FileNotFoundError when the file does not exist.
        """
        return self._existing_path(name, "license")

    def get_node_image(self, name: str) -> str:
        return self._cascade(name, "image", "")

    def get_node_group(self, name: str) -> str:
        return self._cascade(name, "group", "")

    def get_node_type(self, name: str) -> str:
        return self._cascade(name, "type", "")

    def get_node_position(self, name: str) -> str:
        return self._cascade(name, "position", "")

    def get_node_entrypoint(self, name: str) -> str:
        return self._cascade(name, "entrypoint", "")

    def get_node_cmd(self, name: str) -> str:
        return self._cascade(name, "cmd", "")

    def get_node_exec(self, name: str) -> Optional[list[str]]:
        """Return default, kind and node commands, in that order."""
        found, node = self._node(name)
        if not found:
            return None
        defaults = self.get_defaults().exec
        kind = self.get_kind(self.get_node_kind(name)).exec or []
        own = _value(node, "exec") or []
        if defaults is None and not kind and not own:
            return None
        return [*(defaults or []), *kind, *own]

    def get_node_user(self, name: str) -> str:
        return self._cascade(name, "user", "")

    def get_node_network_mode(self, name: str) -> str:
        return self._cascade(name, "network_mode", "")

    def get_node_sandbox(self, name: str) -> str:
        return self._cascade(name, "sandbox", "")

    def get_node_kernel(self, name: str) -> str:
        return self._cascade(name, "kernel", "")

    def get_node_runtime(self, name: str) -> str:
        return self._cascade(name, "runtime", "")

    def get_node_cpu(self, name: str) -> str:
        return self._cascade(name, "cpu", "")

    def get_node_ram(self, name: str) -> str:
        return self._cascade(name, "ram", "")

    def get_node_extras(self, name: str) -> Optional[Extras]:
        """Return the extras of the first level that has any."""
        found, node = self._node(name)
        if not found:
            return None
        node_extras = _value(node, "extras")
        if node_extras is not None:
            return node_extras
        kind_extras = self.get_kind(self.get_node_kind(name)).extras
        if kind_extras is not None:
            return kind_extras
        return self.get_defaults().extras

    def import_envs(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Import environment variables into every definition that asks for it."""
        definitions = [
            self.defaults,
            *(self.kinds or {}).values(),
            *(self.nodes or {}).values(),
        ]
        for definition in definitions:
            if definition is not None:
                definition.import_envs(environ)