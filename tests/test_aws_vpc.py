import pytest

from pulumi_kube_cluster.aws.vpc import subnet_cidrs


def test_subnet_cidrs_per_zone():
    assert subnet_cidrs("10.0.0.0/16", 3) == [
        ("10.0.0.0/20", "10.0.64.0/18"),
        ("10.0.16.0/20", "10.0.128.0/18"),
        ("10.0.32.0/20", "10.0.192.0/18"),
    ]


def test_subnet_cidrs_follow_vpc_block():
    assert subnet_cidrs("172.20.0.0/16", 1) == [("172.20.0.0/20", "172.20.64.0/18")]


def test_too_many_zones():
    with pytest.raises(ValueError):
        subnet_cidrs("10.0.0.0/16", 4)
