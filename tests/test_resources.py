from nodedisk.constants import (
    NDM_BLOCK_DEVICE_KIND,
    NDM_DISK_KIND,
    NDM_VERSION,
)
from nodedisk.resources import (
    BlockDevice,
    BlockDeviceList,
    DeviceDevLink,
    DeviceSpec,
    Disk,
    DiskDevLink,
    DiskList,
    DiskSpec,
    ObjectMeta,
    TypeMeta,
)


def _disk():
    return Disk(
        type_meta=TypeMeta(kind=NDM_DISK_KIND, api_version=NDM_VERSION),
        object_meta=ObjectMeta(name="fake-disk-uid", labels={"a": "b"}),
        spec=DiskSpec(
            path="dev/disk-fake-path",
            dev_links=[DiskDevLink(kind="by-id", links=["link-1"])],
        ),
    )


def _device():
    return BlockDevice(
        type_meta=TypeMeta(kind=NDM_BLOCK_DEVICE_KIND, api_version=NDM_VERSION),
        object_meta=ObjectMeta(name="fake-blockdevice-uid", labels={"a": "b"}),
        spec=DeviceSpec(
            path="dev/disk-fake-path",
            dev_links=[DeviceDevLink(kind="by-path", links=["link-1"])],
        ),
    )


def test_disk_deep_copy_is_equal():
    disk = _disk()
    assert disk.deep_copy() == disk


def test_disk_deep_copy_is_independent():
    disk = _disk()
    copied = disk.deep_copy()
    copied.object_meta.labels["a"] = "changed"
    copied.spec.dev_links[0].links.append("link-2")
    copied.status.state = "Inactive"
    assert disk.object_meta.labels == {"a": "b"}
    assert disk.spec.dev_links[0].links == ["link-1"]
    assert disk.status.state == ""


def test_block_device_deep_copy_is_independent():
    device = _device()
    copied = device.deep_copy()
    assert copied == device
    copied.object_meta.labels["x"] = "y"
    copied.spec.dev_links[0].links.clear()
    assert "x" not in device.object_meta.labels
    assert device.spec.dev_links[0].links == ["link-1"]


def test_name_property_follows_object_meta():
    disk = _disk()
    device = _device()
    assert disk.name == "fake-disk-uid"
    assert device.name == "fake-blockdevice-uid"


def test_deep_copy_keeps_resource_kinds():
    disk_copy = _disk().deep_copy()
    device_copy = _device().deep_copy()
    assert disk_copy.type_meta.kind == "Disk"
    assert device_copy.type_meta.kind == "BlockDevice"
    assert disk_copy.KIND == "Disk"
    assert device_copy.KIND == "BlockDevice"


def test_default_instances_do_not_share_mutable_state():
    first, second = Disk(), Disk()
    first.object_meta.labels["k"] = "v"
    first.spec.dev_links.append(DiskDevLink(kind="by-id"))
    assert second.object_meta.labels == {}
    assert second.spec.dev_links == []


def test_lists_start_empty_and_hold_items():
    disks = DiskList(type_meta=TypeMeta(kind=NDM_DISK_KIND))
    devices = BlockDeviceList()
    assert disks.items == [] and devices.items == []
    devices.items.append(_device())
    assert devices.items[0].name == "fake-blockdevice-uid"
    assert BlockDeviceList().items == []