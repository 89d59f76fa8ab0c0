"""Container runtime settings, options and the registry of runtimes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from clabkit.types.nodes import MgmtNet

DOCKER_RUNTIME = "docker"
CONTAINERD_RUNTIME = "containerd"
IGNITE_RUNTIME = "ignite"

# Seconds used when a configuration gives no positive timeout.
DEFAULT_TIMEOUT = 30.0


@dataclass
class RuntimeConfig:
    """Settings shared by all container runtimes."""

    timeout: float = 0.0
    graceful_shutdown: bool = False
    debug: bool = False
    keep_mgmt_net: bool = False


class ContainerRuntime:
    """Common state of a container runtime: its settings and management network."""

    name: str = ""

    def __init__(self, mgmt: Optional[MgmtNet] = None) -> None:
        self.config = RuntimeConfig()
        self.mgmt = mgmt if mgmt is not None else MgmtNet()

    def with_config(self, cfg: RuntimeConfig) -> None:
        """Take timeout, debug and graceful shutdown from ``cfg``.

        A timeout that is not positive is replaced by the default.
        """
        self.config.timeout = cfg.timeout
        self.config.debug = cfg.debug
        self.config.graceful_shutdown = cfg.graceful_shutdown
        if self.config.timeout <= 0:
            self.config.timeout = DEFAULT_TIMEOUT

    def with_mgmt_net(self, mgmt: MgmtNet) -> None:
        """Use ``mgmt`` as the management network."""
        self.mgmt = mgmt

    def with_keep_mgmt_net(self) -> None:
        """Keep the management network when the lab is destroyed."""
        self.config.keep_mgmt_net = True

    def apply(self, *args: "RuntimeOption") -> "ContainerRuntime":
        """Apply the given options in order and return the runtime."""
        for option in args:
            option(self)
        return self


RuntimeOption = Callable[[ContainerRuntime], None]
Initializer = Callable[[], ContainerRuntime]

CONTAINER_RUNTIMES: dict[str, Initializer] = {}


def register(name: str, init_fn: Initializer) -> None:
    """Register a factory for the runtime called ``name``."""
    CONTAINER_RUNTIMES[name] = init_fn


def with_config(cfg: RuntimeConfig) -> RuntimeOption:
    """Option that applies ``cfg`` to a runtime."""

    def option(runtime: ContainerRuntime) -> None:
        runtime.with_config(cfg)

    return option


def with_mgmt_net(mgmt: MgmtNet) -> RuntimeOption:
    """Option that sets the management network of a runtime."""

    def option(runtime: ContainerRuntime) -> None:
        runtime.with_mgmt_net(mgmt)

    return option


def with_keep_mgmt_net() -> RuntimeOption:
    """Option that makes a runtime keep its management network."""

    def option(runtime: ContainerRuntime) -> None:
        runtime.with_keep_mgmt_net()

    return option