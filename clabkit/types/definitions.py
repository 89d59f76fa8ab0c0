"""Node definitions as they appear in a lab topology file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

# Environment variable holding the expected number of interfaces of a container.
CLAB_ENV_INTFS = "CLAB_INTFS"

IMPORT_ENVS_KEY = "__IMPORT_ENVS"


@dataclass
class ConfigDispatcher:
    """Variables for the configuration engine that runs after nodes start."""

    vars: Optional[dict[str, Any]] = None

    def get_vars(self) -> Optional[dict[str, Any]]:
        """Return the configuration variables, or None when none are set."""
        return self.vars


@dataclass
class Extras:
    """Extra node parameters that are not part of the generic node config."""

    srl_agents: list[str] = field(default_factory=list)
    mysocket_proxy: str = ""


@dataclass
class NodeDefinition:
    """The settings a node, a kind or the defaults can carry in a lab definition."""

    kind: str = ""
    group: str = ""
    type: str = ""
    startup_config: str = ""
    startup_delay: int = 0
    enforce_startup_config: bool = False
    config: Optional[ConfigDispatcher] = None
    image: str = ""
    license: str = ""
    position: str = ""
    entrypoint: str = ""
    cmd: str = ""
    exec: Optional[list[str]] = None
    binds: Optional[list[str]] = None
    ports: Optional[list[str]] = None
    mgmt_ipv4: str = ""
    mgmt_ipv6: str = ""
    publish: Optional[list[str]] = None
    env: Optional[dict[str, str]] = None
    user: str = ""
    labels: Optional[dict[str, str]] = None
    network_mode: str = ""
    sandbox: str = ""
    kernel: str = ""
    runtime: str = ""
    cpu: str = ""
    ram: str = ""
    extras: Optional[Extras] = None

    def import_envs(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """Copy variables from ``environ`` into ``env`` when ``__IMPORT_ENVS`` is ``true``.

        Variables already set on the node are kept. ``environ`` defaults
        to the process environment.
        """
        if self.env is None:
            return
        if self.env.get(IMPORT_ENVS_KEY) != "true":
            return
        source = os.environ if environ is None else environ
        for key, value in source.items():
            self.env.setdefault(key, value)