# clabkit

`clabkit` models the topologies of container-based network labs. It also
holds the logic around them that does not depend on a container runtime.
It has no third-party dependencies.

## Topologies

`clabkit.types.topology.Topology` holds `defaults`, `kinds` and `nodes`,
each made of `clabkit.types.definitions.NodeDefinition` objects, and a
list of `LinkConfig` links.

The `get_node_*` methods resolve a setting in this order: the node first,
then its kind, then the defaults.

- `get_node_env` and `get_node_labels` merge the three levels, and the node
  wins. `get_node_config_dispatcher` merges configuration variables
  recursively.
- `get_node_exec` joins the default, kind and node commands, in that order.
- `get_node_startup_config` and `get_node_license` expand `~` or make the
  path absolute, and raise `FileNotFoundError` when the file is missing.
- `get_node_ports` parses `[ip:]hostPort:containerPort[/proto]` specs with
  `parse_port_specs`. It returns the exposed ports, such as `"8080/tcp"`,
  and their `PortBinding`s. A malformed spec raises `ValueError`.
- `import_envs` copies environment variables into every definition whose
  `env` sets `__IMPORT_ENVS` to `"true"`. Variables already defined are kept.

```python
from clabkit.types.definitions import NodeDefinition
from clabkit.types.topology import Topology

topo = Topology(
    defaults=NodeDefinition(user="user1"),
    kinds={"srl": NodeDefinition(image="image:latest", env={"env1": "v1"})},
    nodes={"node1": NodeDefinition(kind="srl", env={"env2": "v2"})},
)

topo.get_node_image("node1")   # "image:latest"
topo.get_node_user("node1")    # "user1"
topo.get_node_env("node1")     # {"env1": "v1", "env2": "v2"}
```

## Node, link and container records

`clabkit.types.nodes` defines the following dataclasses:

- `NodeConfig`
- `Link`, whose `str()` is `link [a:e1, b:e1]`
- `Endpoint`
- `MgmtNet`
- `GenericContainer`
- `GenericMgmtIPs`
- `GenericFilter`

`filter_from_label_strings(["key=value", "key"])` builds label filters. A
string with `=` gives an equality filter, and a bare key gives an `exists`
filter.

## Utilities

- `clabkit.utils.env`:
  - `merge_maps` merges nested mappings recursively, and later values win.
  - `merge_string_maps` merges flat string mappings and returns `None` when the result is empty.
  - `convert_envs` turns a mapping into `KEY=VALUE` strings.
  - `string_in_slice` finds a string in a list.
- `clabkit.utils.containers`:
  - `get_canonical_image_name("alpine")` returns `"docker.io/library/alpine:latest"`.
  - `get_cni_binary_path()` returns `CNI_BIN` or `/opt/cni/bin`.
- `clabkit.utils.files`:
  - `file_exists`
  - `copy_file`
  - `copy_file_contents`
  - `create_file`
  - `create_directory`
  - `read_file_content`
- `clabkit.utils.mac.gen_mac(oui)` returns a random MAC address under the prefix `oui`.

## Runtime helpers

`clabkit.runtime.base` provides three things:

- `RuntimeConfig`.
- A `ContainerRuntime` base that keeps the settings and the management network.
- A registry of runtime factories, filled with `register` and held in `CONTAINER_RUNTIMES`.

The options `with_config`, `with_mgmt_net` and `with_keep_mgmt_net` are applied with `ContainerRuntime.apply`. A timeout that is not positive becomes 30 seconds.

```python
from clabkit.runtime.base import ContainerRuntime, RuntimeConfig, with_config, with_keep_mgmt_net

rt = ContainerRuntime().apply(with_config(RuntimeConfig(timeout=0)), with_keep_mgmt_net())
rt.config.timeout        # 30.0
rt.config.keep_mgmt_net  # True
```

`clabkit.runtime.containerd` has these helpers:

- `build_filter_string` builds a label filter expression.
- `cni_config` builds the CNI configuration list for the management bridge.
- `parse_mounts` parses bind strings.
- `port_mappings` builds portmap entries.
- `extract_ip_info_from_labels` reads the management addresses from the labels.
- `default_bridge_name` gives the bridge name.
- `task_status_text` gives a human status, such as `Exited (0) 5 seconds ago`.

`clabkit.runtime.docker` has these helpers:

- `build_filter_args` builds filter arguments.
- `network_create_options` builds the network-create body.
- `existing_bridge_name` finds the bridge behind an existing network.
- `endpoint_config` builds the endpoint settings for a node.
- `produce_generic_container_list` turns container list entries into `GenericContainer`s.

```python
from clabkit.runtime.containerd import build_filter_string
from clabkit.runtime.docker import build_filter_args
from clabkit.types.nodes import filter_from_label_strings

filters = filter_from_label_strings(["containerlab=lab1"])
build_filter_string(filters)  # 'labels."containerlab"=="lab1"'
build_filter_args(filters)    # {"label": ["containerlab=lab1"]}
```

## What it does not do

`clabkit` does not connect to Docker, containerd or any other runtime. It
does not create or delete containers, networks, namespaces or links. It
does not read topology files from disk: a `Topology` is built in Python.
It has no command-line tool. Its runtime modules only compute the requests,
filters and configurations that a runtime client would send.

## Installation

```
pip install .
```

## Running the tests

```
pip install ".[test]"
pytest
```