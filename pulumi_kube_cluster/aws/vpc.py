"""
Dedicated VPC for an EKS cluster.

Every availability zone gets a public subnet holding its NAT gateway and
the internet facing load balancers, and a private subnet for the nodes that
egresses through that zone's NAT gateway.
"""

import ipaddress
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from config.aws import AWSConfig

PUBLIC_SUBNET_PREFIX = 20
PRIVATE_SUBNET_PREFIX = 18

ELB_ROLE_TAG = "kubernetes.io/role/elb"
INTERNAL_ELB_ROLE_TAG = "kubernetes.io/role/internal-elb"


def subnet_cidrs(vpc_cidr: str, zone_count: int) -> list[tuple[str, str]]:
    """(public, private) CIDR pair per availability zone.

    The /16 is cut into four /18s; the first holds the /20 public subnets,
    the remaining three are the private subnets.
    """
    quarters = list(ipaddress.ip_network(vpc_cidr).subnets(new_prefix=PRIVATE_SUBNET_PREFIX))
    if zone_count > len(quarters) - 1:
        raise ValueError(f"{vpc_cidr} has room for {len(quarters) - 1} zones, got {zone_count}")
    public = list(quarters[0].subnets(new_prefix=PUBLIC_SUBNET_PREFIX))
    return [(str(public[i]), str(quarters[i + 1])) for i in range(zone_count)]


@dataclass(frozen=True)
class Zone:
    name: str
    public_subnet: aws.ec2.Subnet
    private_subnet: aws.ec2.Subnet
    nat_gateway: aws.ec2.NatGateway


class VPC(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: AWSConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("kube-cluster:aws:VPC", name, None, opts)

        self.config = config
        self._name = name

        self.vpc = aws.ec2.Vpc(
            name,
            cidr_block=config.vpc_cidr,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=config.tags(Name=config.id),
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=config.tags(Name=f"{config.id}-igw"),
            opts=pulumi.ResourceOptions(parent=self),
        )
        # shared by the public subnets of every zone
        self.public_route_table = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(cidr_block="0.0.0.0/0", gateway_id=self.igw.id)
            ],
            tags=config.tags(Name=f"{config.id}-public"),
            opts=pulumi.ResourceOptions(parent=self),
        )

        cidrs = subnet_cidrs(config.vpc_cidr, len(config.availability_zones))
        self.zones = [
            self._add_zone(az, public_cidr, private_cidr)
            for az, (public_cidr, private_cidr) in zip(config.availability_zones, cidrs)
        ]

        self.register_outputs(
            {
                "vpc_id": self.vpc_id,
                "public_subnet_ids": self.public_subnet_ids,
                "private_subnet_ids": self.private_subnet_ids,
            }
        )

    def _subnet(self, az: str, kind: str, cidr: str, **extra) -> aws.ec2.Subnet:
        return aws.ec2.Subnet(
            f"{self._name}-{kind}-{az}",
            vpc_id=self.vpc.id,
            cidr_block=cidr,
            availability_zone=az,
            tags=self.config.tags(
                Name=f"{self.config.id}-{kind}-{az}",
                **{ELB_ROLE_TAG if kind == "public" else INTERNAL_ELB_ROLE_TAG: "1"},
            ),
            opts=pulumi.ResourceOptions(parent=self),
            **extra,
        )

    def _add_zone(self, az: str, public_cidr: str, private_cidr: str) -> Zone:
        name = self._name
        tags = self.config.tags
        opts = pulumi.ResourceOptions(parent=self)

        public_subnet = self._subnet(az, "public", public_cidr, map_public_ip_on_launch=True)
        aws.ec2.RouteTableAssociation(
            f"{name}-public-rta-{az}",
            subnet_id=public_subnet.id,
            route_table_id=self.public_route_table.id,
            opts=opts,
        )

        eip = aws.ec2.Eip(
            f"{name}-eip-{az}",
            domain="vpc",
            tags=tags(Name=f"{self.config.id}-nat-{az}"),
            opts=opts,
        )
        nat = aws.ec2.NatGateway(
            f"{name}-nat-{az}",
            allocation_id=eip.id,
            subnet_id=public_subnet.id,
            tags=tags(Name=f"{self.config.id}-nat-{az}"),
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.igw]),
        )

        private_subnet = self._subnet(az, "private", private_cidr)
        private_route_table = aws.ec2.RouteTable(
            f"{name}-private-rt-{az}",
            vpc_id=self.vpc.id,
            routes=[aws.ec2.RouteTableRouteArgs(cidr_block="0.0.0.0/0", nat_gateway_id=nat.id)],
            tags=tags(Name=f"{self.config.id}-private-{az}"),
            opts=opts,
        )
        aws.ec2.RouteTableAssociation(
            f"{name}-private-rta-{az}",
            subnet_id=private_subnet.id,
            route_table_id=private_route_table.id,
            opts=opts,
        )

        return Zone(
            name=az,
            public_subnet=public_subnet,
            private_subnet=private_subnet,
            nat_gateway=nat,
        )

    @property
    def vpc_id(self) -> pulumi.Output[str]:
        return self.vpc.id

    @property
    def public_subnet_ids(self) -> list[pulumi.Output[str]]:
        return [zone.public_subnet.id for zone in self.zones]

    @property
    def private_subnet_ids(self) -> list[pulumi.Output[str]]:
        return [zone.private_subnet.id for zone in self.zones]
