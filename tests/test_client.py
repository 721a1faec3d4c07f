import pytest

from nodedisk.client import (
    AlreadyExistsError,
    ClientError,
    ConflictError,
    InMemoryClient,
    NotFoundError,
    parse_label_selector,
)
from nodedisk.constants import (
    FALSE_STRING,
    KUBERNETES_HOST_NAME_LABEL,
    NDM_MANAGED_KEY,
    TRUE_STRING,
)
from nodedisk.resources import BlockDevice, Disk, ObjectMeta


def _disk(name, labels=None, version=""):
    return Disk(
        object_meta=ObjectMeta(
            name=name, labels=dict(labels or {}), resource_version=version
        )
    )


def _device(name, labels=None):
    return BlockDevice(object_meta=ObjectMeta(name=name, labels=dict(labels or {})))


def test_create_then_get_round_trip():
    client = InMemoryClient()
    disk = _disk("fake-disk-uid", {"a": "b"})
    client.create(disk)
    assert client.get("Disk", "fake-disk-uid") == disk


def test_initial_objects_are_stored():
    client = InMemoryClient([_disk("dummy-disk")])
    assert client.get("Disk", "dummy-disk").name == "dummy-disk"


def test_get_returns_copy():
    client = InMemoryClient()
    client.create(_disk("fake-disk-uid"))
    fetched = client.get("Disk", "fake-disk-uid")
    fetched.status.state = "Inactive"
    assert client.get("Disk", "fake-disk-uid").status.state == ""


def test_create_stores_copy():
    client = InMemoryClient()
    disk = _disk("fake-disk-uid")
    client.create(disk)
    disk.object_meta.labels["x"] = "y"
    assert client.get("Disk", "fake-disk-uid").object_meta.labels == {}


def test_create_duplicate_raises():
    client = InMemoryClient()
    client.create(_disk("fake-disk-uid"))
    with pytest.raises(AlreadyExistsError):
        client.create(_disk("fake-disk-uid"))


def test_create_without_name_raises():
    with pytest.raises(ClientError):
        InMemoryClient().create(_disk(""))


def test_get_missing_raises():
    with pytest.raises(NotFoundError):
        InMemoryClient().get("Disk", "absent")


def test_kinds_are_kept_apart():
    client = InMemoryClient()
    client.create(_disk("same-name"))
    client.create(_device("same-name"))
    assert isinstance(client.get("BlockDevice", "same-name"), BlockDevice)
    client.delete("Disk", "same-name")
    with pytest.raises(NotFoundError):
        client.get("Disk", "same-name")
    assert client.get("BlockDevice", "same-name").name == "same-name"


def test_update_replaces_object():
    client = InMemoryClient()
    client.create(_disk("fake-disk-uid"))
    changed = _disk("fake-disk-uid")
    changed.status.state = "Inactive"
    client.update(changed)
    assert client.get("Disk", "fake-disk-uid").status.state == "Inactive"


def test_update_missing_raises():
    with pytest.raises(NotFoundError):
        InMemoryClient().update(_disk("absent"))


def test_update_with_stale_version_conflicts():
    client = InMemoryClient()
    client.create(_disk("fake-disk-uid", version="7"))
    with pytest.raises(ConflictError):
        client.update(_disk("fake-disk-uid", version="3"))
    client.update(_disk("fake-disk-uid", version="7"))
    assert client.get("Disk", "fake-disk-uid").object_meta.resource_version == "7"


def test_delete_then_get_raises():
    client = InMemoryClient()
    client.create(_device("fake-blockdevice-uid"))
    client.delete("BlockDevice", "fake-blockdevice-uid")
    with pytest.raises(NotFoundError):
        client.get("BlockDevice", "fake-blockdevice-uid")


def test_delete_missing_raises():
    with pytest.raises(NotFoundError):
        InMemoryClient().delete("Disk", "another-uuid")


def test_list_sorted_by_name_and_filtered_by_kind():
    client = InMemoryClient()
    client.create(_disk("new-fake-disk-uid"))
    client.create(_disk("fake-disk-uid"))
    client.create(_device("fake-blockdevice-uid"))
    names = [d.name for d in client.list("Disk")]
    assert names == ["fake-disk-uid", "new-fake-disk-uid"]


def test_list_applies_host_and_managed_selector():
    client = InMemoryClient()
    host = "fake-host-name"
    client.create(_disk("on-host", {KUBERNETES_HOST_NAME_LABEL: host}))
    client.create(
        _disk(
            "managed",
            {KUBERNETES_HOST_NAME_LABEL: host, NDM_MANAGED_KEY: TRUE_STRING},
        )
    )
    client.create(
        _disk(
            "unmanaged",
            {KUBERNETES_HOST_NAME_LABEL: host, NDM_MANAGED_KEY: FALSE_STRING},
        )
    )
    client.create(_disk("elsewhere", {KUBERNETES_HOST_NAME_LABEL: "other-host"}))
    selector = (
        f"{KUBERNETES_HOST_NAME_LABEL}={host},{NDM_MANAGED_KEY}!={FALSE_STRING}"
    )
    assert [d.name for d in client.list("Disk", selector)] == ["managed", "on-host"]


def test_list_exists_operators():
    client = InMemoryClient()
    client.create(_disk("labelled", {"k": "v"}))
    client.create(_disk("plain"))
    assert [d.name for d in client.list("Disk", "k")] == ["labelled"]
    assert [d.name for d in client.list("Disk", "!k")] == ["plain"]


def test_parse_label_selector():
    selector = f"{KUBERNETES_HOST_NAME_LABEL}=fake-host-name,{NDM_MANAGED_KEY}!=false"
    assert parse_label_selector(selector) == [
        (KUBERNETES_HOST_NAME_LABEL, "=", "fake-host-name"),
        (NDM_MANAGED_KEY, "!=", FALSE_STRING),
    ]


def test_parse_double_equals_and_empty():
    assert parse_label_selector("a==b") == parse_label_selector("a=b")
    assert parse_label_selector("") == []
    assert parse_label_selector(None) == []


@pytest.mark.parametrize("selector", ["a=b,,c=d", "=b", "a b=c", "a=b=c"])
def test_parse_invalid_selector_raises(selector):
    with pytest.raises(ValueError):
        parse_label_selector(selector)