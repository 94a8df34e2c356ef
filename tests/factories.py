from config import AddonsConfig, GCPConfig


def gcp_config(**overrides) -> GCPConfig:
    values = {
        "name": "demo",
        "id": "demo-id",
        "region": "us-central1",
        "zone": "us-central1-a",
        "billing_account_id": "000000-000000-000000",
        "folder_parent": "organizations/1234",
        "addons": AddonsConfig(),
    }
    values.update(overrides)
    return GCPConfig(**values)
