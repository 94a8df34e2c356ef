import ipaddress
import itertools

import pytest

from pulumi_kube_cluster.gcp.locals import NetworkPlan, initialize
from tests.factories import gcp_config


def test_default_plan_is_inside_block_and_disjoint():
    plan = NetworkPlan.from_block()
    block = ipaddress.ip_network("10.0.0.0/14")
    ranges = [ipaddress.ip_network(r) for r in (plan.pods, plan.services, plan.nodes)]

    assert all(r.subnet_of(block) for r in ranges)
    for first, second in itertools.combinations(ranges, 2):
        assert not first.overlaps(second)
    assert plan.pods == "10.0.0.0/15"
    assert plan.services == "10.2.0.0/16"
    assert plan.nodes == "10.3.0.0/16"


def test_overlapping_plan_is_rejected():
    plan = NetworkPlan(
        block="10.0.0.0/14",
        pods="10.0.0.0/15",
        services="10.1.0.0/16",
        nodes="10.3.0.0/16",
        master="172.16.0.0/28",
    )
    with pytest.raises(ValueError, match="overlaps"):
        plan.validate()


def test_range_outside_block_is_rejected():
    plan = NetworkPlan(
        block="10.0.0.0/14",
        pods="10.0.0.0/15",
        services="10.2.0.0/16",
        nodes="10.8.0.0/16",
        master="172.16.0.0/28",
    )
    with pytest.raises(ValueError, match="outside"):
        plan.validate()


def test_master_range_must_be_separate_slash_28():
    with pytest.raises(ValueError, match="/28"):
        NetworkPlan.from_block(master="172.16.0.0/24")
    with pytest.raises(ValueError, match="overlaps"):
        NetworkPlan.from_block(master="10.3.255.240/28")


def test_initialize_derives_names_and_logging():
    config = gcp_config(is_workload_logs_enabled=True)
    derived = initialize(config)

    assert derived.pod_secondary_range_name == "demo-id-pods"
    assert derived.service_secondary_range_name == "demo-id-services"
    assert derived.network_tag == "demo-id"
    assert derived.logging_components == ("SYSTEM_COMPONENTS", "WORKLOADS")
    assert initialize(gcp_config()).logging_components == ("SYSTEM_COMPONENTS",)
