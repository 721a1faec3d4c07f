"""Resource records for disks and block devices kept in the cluster store."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from .constants import NDM_BLOCK_DEVICE_KIND, NDM_DISK_KIND


@dataclass
class TypeMeta:
    """Kind and API version of a resource."""

    kind: str = ""
    api_version: str = ""


@dataclass
class ObjectMeta:
    """Name, namespace, labels and version of a stored resource."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""


@dataclass
class FileSystemInfo:
    """Filesystem type and mount point of a disk or partition."""

    type: str = ""
    mountpoint: str = ""


@dataclass
class DiskCapacity:
    storage: int = 0
    logical_sector_size: int = 0
    physical_sector_size: int = 0


@dataclass
class DiskDetails:
    model: str = ""
    serial: str = ""
    vendor: str = ""
    firmware_revision: str = ""
    compliance: str = ""
    drive_type: str = ""
    rotation_rate: int = 0


@dataclass
class DiskDevLink:
    """A group of device links of one kind, such as by-id or by-path."""

    kind: str = ""
    links: list[str] = field(default_factory=list)


@dataclass
class Partition:
    partition_type: str = ""
    file_system: FileSystemInfo = field(default_factory=FileSystemInfo)


@dataclass
class DiskSpec:
    path: str = ""
    capacity: DiskCapacity = field(default_factory=DiskCapacity)
    details: DiskDetails = field(default_factory=DiskDetails)
    dev_links: list[DiskDevLink] = field(default_factory=list)
    file_system: FileSystemInfo = field(default_factory=FileSystemInfo)
    partition_details: list[Partition] = field(default_factory=list)


@dataclass
class DiskStatus:
    state: str = ""


@dataclass
class TemperatureStat:
    """Drive temperatures in degrees Celsius."""

    current_temperature: int = 0
    highest_temperature: int = 0
    lowest_temperature: int = 0


@dataclass
class DiskStat:
    total_bytes_read: int = 0
    total_bytes_written: int = 0
    device_utilization_rate: float = 0.0
    percent_endurance_used: float = 0.0
    temp_info: TemperatureStat = field(default_factory=TemperatureStat)


@dataclass
class Disk:
    """A disk resource."""

    KIND: ClassVar[str] = NDM_DISK_KIND

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    object_meta: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DiskSpec = field(default_factory=DiskSpec)
    status: DiskStatus = field(default_factory=DiskStatus)
    stats: DiskStat = field(default_factory=DiskStat)

    @property
    def name(self) -> str:
        return self.object_meta.name

    def deep_copy(self) -> Disk:
        """Return an independent copy of this disk."""
        return copy.deepcopy(self)


@dataclass
class DiskList:
    type_meta: TypeMeta = field(default_factory=TypeMeta)
    items: list[Disk] = field(default_factory=list)


@dataclass
class DeviceCapacity:
    storage: int = 0
    logical_sector_size: int = 0
    physical_sector_size: int = 0


@dataclass
class DeviceDetails:
    model: str = ""
    serial: str = ""
    vendor: str = ""
    firmware_revision: str = ""
    compliance: str = ""
    device_type: str = ""


@dataclass
class DeviceDevLink:
    """A group of device links of one kind, such as by-id or by-path."""

    kind: str = ""
    links: list[str] = field(default_factory=list)


@dataclass
class DeviceSpec:
    node_name: str = ""
    path: str = ""
    details: DeviceDetails = field(default_factory=DeviceDetails)
    capacity: DeviceCapacity = field(default_factory=DeviceCapacity)
    dev_links: list[DeviceDevLink] = field(default_factory=list)
    partitioned: str = ""
    file_system: FileSystemInfo = field(default_factory=FileSystemInfo)
    claim_ref: Optional[dict[str, Any]] = None


@dataclass
class DeviceStatus:
    claim_state: str = ""
    state: str = ""


@dataclass
class BlockDevice:
    """A block device resource."""

    KIND: ClassVar[str] = NDM_BLOCK_DEVICE_KIND

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    object_meta: ObjectMeta = field(default_factory=ObjectMeta)
    spec: DeviceSpec = field(default_factory=DeviceSpec)
    status: DeviceStatus = field(default_factory=DeviceStatus)

    @property
    def name(self) -> str:
        return self.object_meta.name

    def deep_copy(self) -> BlockDevice:
        """Return an independent copy of this block device."""
        return copy.deepcopy(self)


@dataclass
class BlockDeviceList:
    type_meta: TypeMeta = field(default_factory=TypeMeta)
    items: list[BlockDevice] = field(default_factory=list)