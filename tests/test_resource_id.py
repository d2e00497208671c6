import pytest

from anf_smb.services.errors import ResourceKind
from anf_smb.services.resource_id import anf_resource_kind, resource_value

ACCOUNT_ID = "/subscriptions/sub/resourceGroups/anf-rg/providers/Microsoft.NetApp/netAppAccounts/acct"
POOL_ID = f"{ACCOUNT_ID}/capacityPools/Pool01"
VOLUME_ID = f"{POOL_ID}/volumes/vol1"
SUBNET_ID = "/subscriptions/sub/resourceGroups/net-rg/providers/Microsoft.Network/virtualNetworks/vnet/subnets/sn"


def test_resource_value_is_case_insensitive():
    assert resource_value(VOLUME_ID, "resourcegroups") == "anf-rg"
    assert resource_value(VOLUME_ID, "capacityPools") == "Pool01"
    assert resource_value(VOLUME_ID, "/volumes") == "vol1"


def test_resource_value_missing_key():
    assert resource_value(ACCOUNT_ID, "volumes") is None
    # Key as the last segment has no value.
    assert resource_value("/subscriptions/sub/resourceGroups", "resourceGroups") is None


@pytest.mark.parametrize(
    "resource_id, expected",
    [
        (ACCOUNT_ID, ResourceKind.ACCOUNT),
        (POOL_ID, ResourceKind.CAPACITY_POOL),
        (VOLUME_ID, ResourceKind.VOLUME),
        (SUBNET_ID, None),
    ],
)
def test_anf_resource_kind(resource_id, expected):
    assert anf_resource_kind(resource_id) is expected
