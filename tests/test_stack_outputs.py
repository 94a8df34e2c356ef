from pulumi_kube_cluster import outputs
from pulumi_kube_cluster.stack_outputs import AwsStackOutputs, GcpStackOutputs


def test_gcp_outputs_map_keys_to_fields():
    parsed = GcpStackOutputs.from_stack_output(
        {
            outputs.CLUSTER_ENDPOINT: "34.0.0.1",
            outputs.CONTAINER_CLUSTER_PROJECT_NUMBER: 123456789012,
            outputs.CERT_MANAGER_GSA_EMAIL: "cert-manager@p.iam.gserviceaccount.com",
            "unrelated": "ignored",
        }
    )
    assert parsed.cluster_endpoint == "34.0.0.1"
    assert parsed.container_cluster_project_number == "123456789012"
    assert parsed.cert_manager_gsa_email == "cert-manager@p.iam.gserviceaccount.com"
    assert parsed.folder_id == ""


def test_non_apply_operations_yield_empty_outputs():
    stack_output = {outputs.CLUSTER_ENDPOINT: "34.0.0.1"}
    for operation in ("preview", "refresh", "destroy"):
        assert GcpStackOutputs.from_stack_output(stack_output, operation) == GcpStackOutputs()


def test_missing_outputs_yield_empty_model():
    assert AwsStackOutputs.from_stack_output(None) == AwsStackOutputs()
    assert AwsStackOutputs.from_stack_output({}) == AwsStackOutputs()


def test_aws_outputs():
    parsed = AwsStackOutputs.from_stack_output(
        {
            outputs.CLUSTER_VPC_ID: "vpc-123",
            outputs.CLUSTER_ENDPOINT: "https://eks.example",
            outputs.CLUSTER_CA_DATA: "Y2E=",
        }
    )
    assert parsed.cluster_vpc_id == "vpc-123"
    assert parsed.cluster_endpoint == "https://eks.example"
    assert parsed.cluster_ca_data == "Y2E="
