"""Block device details and their conversion into block device resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import (
    BLOCK_DEVICE_UNCLAIMED,
    HOST_NAME_KEY,
    KUBERNETES_HOST_NAME_LABEL,
    NDM_ACTIVE,
    NDM_BLOCK_DEVICE_KIND,
    NDM_BLOCK_DEVICE_PREFIX,
    NDM_DEFAULT_DEVICE_TYPE,
    NDM_DEVICE_TYPE_KEY,
    NDM_DISK_PREFIX,
    NDM_MANAGED_KEY,
    NDM_NOT_PARTITIONED,
    NDM_VERSION,
    NODE_NAME_KEY,
    TRUE_STRING,
)
from .diskinfo import DiskInfo, FSInfo
from .resources import (
    BlockDevice,
    DeviceCapacity,
    DeviceDetails,
    DeviceDevLink,
    DeviceSpec,
    DeviceStatus,
    ObjectMeta,
    TypeMeta,
)


def disk_to_device_uuid(disk_uuid: str) -> str:
    """Turn a disk UUID (disk-xxx) into a block device UUID (blockdevice-xxx)."""
    if disk_uuid.startswith(NDM_DISK_PREFIX):
        disk_uuid = disk_uuid[len(NDM_DISK_PREFIX):]
    return NDM_BLOCK_DEVICE_PREFIX + disk_uuid


@dataclass
class DeviceInfo:
    """Details of one block device."""

    node_attributes: dict[str, str] = field(default_factory=dict)
    uuid: str = ""
    namespace: str = ""
    capacity: int = 0
    model: str = ""
    serial: str = ""
    vendor: str = ""
    path: str = ""
    by_id_dev_links: list[str] = field(default_factory=list)
    by_path_dev_links: list[str] = field(default_factory=list)
    firmware_revision: str = ""
    logical_sector_size: int = 0
    physical_sector_size: int = 0
    compliance: str = ""
    device_type: str = ""
    partition_type: str = ""
    file_system_info: FSInfo = field(default_factory=FSInfo)

    @classmethod
    def from_disk_info(cls, disk_info: DiskInfo) -> DeviceInfo:
        """Build block device details from the details of a disk."""
        fs = disk_info.file_system_information
        return cls(
            node_attributes=disk_info.node_attributes,
            uuid=disk_to_device_uuid(disk_info.probe_identifiers.uuid),
            capacity=disk_info.capacity,
            model=disk_info.model,
            serial=disk_info.serial,
            vendor=disk_info.vendor,
            path=disk_info.path,
            by_id_dev_links=disk_info.by_id_dev_links,
            by_path_dev_links=disk_info.by_path_dev_links,
            logical_sector_size=disk_info.logical_sector_size,
            physical_sector_size=disk_info.physical_sector_size,
            compliance=disk_info.compliance,
            device_type=disk_info.drive_type,
            file_system_info=FSInfo(fs.file_system, fs.mount_point),
        )

    def to_device(self) -> BlockDevice:
        """Build the block device resource describing this device."""
        return BlockDevice(
            type_meta=self.type_meta(),
            object_meta=self.object_meta(),
            spec=self.device_spec(),
            status=self.status(),
        )

    def object_meta(self) -> ObjectMeta:
        return ObjectMeta(
            name=self.uuid,
            namespace=self.namespace,
            labels={
                KUBERNETES_HOST_NAME_LABEL: self.node_attributes.get(HOST_NAME_KEY, ""),
                NDM_DEVICE_TYPE_KEY: NDM_DEFAULT_DEVICE_TYPE,
                NDM_MANAGED_KEY: TRUE_STRING,
            },
        )

    def type_meta(self) -> TypeMeta:
        return TypeMeta(kind=NDM_BLOCK_DEVICE_KIND, api_version=NDM_VERSION)

    def status(self) -> DeviceStatus:
        return DeviceStatus(claim_state=BLOCK_DEVICE_UNCLAIMED, state=NDM_ACTIVE)

    def device_spec(self) -> DeviceSpec:
        return DeviceSpec(
            node_name=self.node_attributes.get(NODE_NAME_KEY, ""),
            path=self.path,
            details=self.device_details(),
            capacity=self.device_capacity(),
            dev_links=self.device_links(),
            partitioned=NDM_NOT_PARTITIONED,
            file_system=self.file_system_info.to_filesystem_info(),
        )

    def device_details(self) -> DeviceDetails:
        return DeviceDetails(
            model=self.model,
            serial=self.serial,
            vendor=self.vendor,
            firmware_revision=self.firmware_revision,
            compliance=self.compliance,
            device_type=self.device_type,
        )

    def device_capacity(self) -> DeviceCapacity:
        return DeviceCapacity(
            storage=self.capacity,
            logical_sector_size=self.logical_sector_size,
            physical_sector_size=self.physical_sector_size,
        )

    def device_links(self) -> list[DeviceDevLink]:
        """Return the by-id and by-path link groups that are not empty."""
        links = []
        if self.by_id_dev_links:
            links.append(DeviceDevLink(kind="by-id", links=list(self.by_id_dev_links)))
        if self.by_path_dev_links:
            links.append(
                DeviceDevLink(kind="by-path", links=list(self.by_path_dev_links))
            )
        return links