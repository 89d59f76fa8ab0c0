import json
from datetime import timedelta

import pytest

from clabkit.runtime.containerd import (
    Mount,
    PortMapping,
    build_filter_string,
    cni_config,
    default_bridge_name,
    extract_ip_info_from_labels,
    parse_mounts,
    port_mappings,
    task_status_text,
)
from clabkit.types.nodes import GenericFilter, GenericMgmtIPs, MgmtNet
from clabkit.types.topology import PortBinding, parse_port_specs


def test_default_bridge_name_without_network():
    assert default_bridge_name(MgmtNet()) == "br-clab"


def test_default_bridge_name_uses_network():
    assert default_bridge_name(MgmtNet(network="lab1")) == "br-lab1"


def test_default_bridge_name_keeps_explicit_bridge():
    assert default_bridge_name(MgmtNet(network="lab1", bridge="mybr")) == "mybr"


def test_build_filter_string_single_label():
    f = GenericFilter(filter_type="label", field="containerlab", operator="=", match="lab")
    assert build_filter_string([f]) == 'labels."containerlab"=="lab"'


def test_build_filter_string_joins_with_comma():
    f1 = GenericFilter(filter_type="label", field="a", operator="=", match="x")
    f2 = GenericFilter(filter_type="label", field="b", operator="!=", match="y")
    assert build_filter_string([f1, f2]) == (
        build_filter_string([f1]) + "," + build_filter_string([f2])
    )


def test_build_filter_string_exists_has_no_operator():
    f = GenericFilter(filter_type="label", field="a", operator="exists")
    assert build_filter_string([f]) == 'labels."a"'


def test_build_filter_string_ignores_other_types():
    f = GenericFilter(filter_type="name", match="node1")
    assert build_filter_string([f]) == ""


def test_extract_ip_info_full():
    labels = {
        "clab.ipv4.addr": "172.20.20.2",
        "clab.ipv4.netmask": "24",
        "clab.ipv6.addr": "2001:db8::2",
        "clab.ipv6.netmask": "64",
    }
    assert extract_ip_info_from_labels(labels) == GenericMgmtIPs(
        ipv4_addr="172.20.20.2", ipv4_plen=24, ipv6_addr="2001:db8::2", ipv6_plen=64
    )


def test_extract_ip_info_missing_labels():
    assert extract_ip_info_from_labels({}) == GenericMgmtIPs()


def test_extract_ip_info_bad_netmask():
    with pytest.raises(ValueError):
        extract_ip_info_from_labels({"clab.ipv4.netmask": "abc"})


def test_cni_config_round_trip():
    mgmt = MgmtNet(
        network="clab",
        bridge="br-clab",
        ipv4_subnet="172.20.20.0/24",
        ipv6_subnet="2001:db8::/64",
        mtu="1500",
    )
    cfg = json.loads(json.dumps(cni_config(mgmt)))
    assert cfg["name"] == "clabmgmt"
    assert cfg["cniVersion"] == "0.4.0"
    assert [p["type"] for p in cfg["plugins"]] == ["bridge", "tuning", "portmap"]
    bridge = cfg["plugins"][0]
    assert bridge["bridge"] == mgmt.bridge
    assert bridge["ipam"]["ranges"] == [
        [{"subnet": mgmt.ipv4_subnet}],
        [{"subnet": mgmt.ipv6_subnet}],
    ]
    assert cfg["plugins"][1]["mtu"] == 1500


def test_cni_config_bad_mtu():
    with pytest.raises(ValueError):
        cni_config(MgmtNet(mtu=""))


def test_parse_mounts_defaults():
    assert parse_mounts(["/a:/b"]) == [Mount("/a", "/b", ["rbind", "rprivate"])]


def test_parse_mounts_with_options():
    (mount,) = parse_mounts(["/a:/b:ro,z"])
    assert mount.options == ["rbind", "rprivate", "ro", "z"]
    assert (mount.source, mount.destination) == ("/a", "/b")


def test_parse_mounts_missing_destination():
    with pytest.raises(ValueError):
        parse_mounts(["/a"])


def test_port_mappings_from_parsed_specs():
    _, bindings = parse_port_specs(["8080:80", "5353:53/udp"])
    result = port_mappings(bindings)
    assert sorted(result, key=lambda m: m.host_port) == [
        PortMapping(host_port=5353, container_port=53, protocol="udp"),
        PortMapping(host_port=8080, container_port=80, protocol="tcp"),
    ]


def test_port_mappings_bad_host_port():
    with pytest.raises(ValueError):
        port_mappings({"80/tcp": [PortBinding(host_port="")]})


def test_port_mapping_to_dict_omits_empty_host_ip():
    m = PortMapping(host_port=8080, container_port=80, protocol="tcp")
    assert m.to_dict() == {"hostPort": 8080, "containerPort": 80, "protocol": "tcp"}
    with_ip = PortMapping(host_port=8080, container_port=80, protocol="tcp", host_ip="10.0.0.1")
    assert with_ip.to_dict()["hostIP"] == "10.0.0.1"


def test_task_status_running():
    assert task_status_text("running", 0, timedelta()) == "Up"


def test_task_status_other_is_titled():
    assert task_status_text("paused", 0, timedelta()) == "Paused"
    assert task_status_text("created", 0, timedelta()) == "Created"


def test_task_status_stopped():
    text = task_status_text("stopped", 3, timedelta(seconds=5))
    assert text.startswith("Exited (3) ")
    assert text.endswith(" ago")
    assert text == "Exited (3) 5 seconds ago"