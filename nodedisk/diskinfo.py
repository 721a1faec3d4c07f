"""Disk details gathered by probes and their conversion into disk resources."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import (
    HOST_NAME_KEY,
    KUBERNETES_HOST_NAME_LABEL,
    NDM_ACTIVE,
    NDM_DEFAULT_DISK_TYPE,
    NDM_DISK_KIND,
    NDM_DISK_TYPE_KEY,
    NDM_MANAGED_KEY,
    NDM_VERSION,
    TRUE_STRING,
)
from .resources import (
    Disk,
    DiskCapacity,
    DiskDetails,
    DiskDevLink,
    DiskSpec,
    DiskStat,
    DiskStatus,
    FileSystemInfo,
    ObjectMeta,
    Partition,
    TemperatureStat,
    TypeMeta,
)

# Filesystem value reported when a device carries no filesystem.
FS_NONE = "None"


@dataclass
class FSInfo:
    """Filesystem type and mount point of a disk or partition."""

    file_system: str = ""
    mount_point: str = ""

    def to_filesystem_info(self) -> FileSystemInfo:
        """Return the resource form; empty when the device has no filesystem."""
        if self.file_system == FS_NONE:
            return FileSystemInfo()
        return FileSystemInfo(type=self.file_system, mountpoint=self.mount_point)


@dataclass
class PartitionInfo:
    """Partition type and filesystem of one partition on a disk."""

    partition_type: str = ""
    file_system_information: FSInfo = field(default_factory=FSInfo)


@dataclass
class ProbeIdentifier:
    """Keys with which each probe recognises a disk."""

    uuid: str = ""
    udev_identifier: str = ""
    smart_identifier: str = ""
    seachest_identifier: str = ""
    mount_identifier: str = ""


@dataclass
class TemperatureInfo:
    """Drive temperatures in degrees Celsius, with validity flags."""

    temperature_data_valid: bool = False
    current_temperature: int = 0
    highest_valid: bool = False
    highest_temperature: int = 0
    lowest_valid: bool = False
    lowest_temperature: int = 0


@dataclass
class DiskInfo:
    """Details of one disk, filled in by the probes."""

    probe_identifiers: ProbeIdentifier = field(default_factory=ProbeIdentifier)
    node_attributes: dict[str, str] = field(default_factory=dict)
    uuid: str = ""
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
    rotation_rate: int = 0
    compliance: str = ""
    disk_type: str = NDM_DEFAULT_DISK_TYPE
    drive_type: str = ""
    file_system_information: FSInfo = field(default_factory=FSInfo)
    partition_data: list[PartitionInfo] = field(default_factory=list)
    total_bytes_read: int = 0
    total_bytes_written: int = 0
    device_utilization_rate: float = 0.0
    percent_endurance_used: float = 0.0
    temperature_info: TemperatureInfo = field(default_factory=TemperatureInfo)

    def to_disk(self) -> Disk:
        """Build the disk resource describing this disk."""
        return Disk(
            type_meta=self.type_meta(),
            object_meta=self.object_meta(),
            spec=self.disk_spec(),
            status=self.status(),
            stats=self.stats(),
        )

    def to_partitions(self) -> list[Partition]:
        """Return the partitions of this disk in resource form."""
        return [
            Partition(
                partition_type=part.partition_type,
                file_system=part.file_system_information.to_filesystem_info(),
            )
            for part in self.partition_data
        ]

    def object_meta(self) -> ObjectMeta:
        return ObjectMeta(
            name=self.uuid,
            labels={
                KUBERNETES_HOST_NAME_LABEL: self.node_attributes.get(HOST_NAME_KEY, ""),
                NDM_DISK_TYPE_KEY: self.disk_type,
                NDM_MANAGED_KEY: TRUE_STRING,
            },
        )

    def type_meta(self) -> TypeMeta:
        return TypeMeta(kind=NDM_DISK_KIND, api_version=NDM_VERSION)

    def status(self) -> DiskStatus:
        return DiskStatus(state=NDM_ACTIVE)

    def disk_spec(self) -> DiskSpec:
        return DiskSpec(
            path=self.path,
            capacity=self.disk_capacity(),
            details=self.disk_details(),
            dev_links=self.disk_links(),
            file_system=self.file_system_information.to_filesystem_info(),
        )

    def disk_details(self) -> DiskDetails:
        return DiskDetails(
            model=self.model,
            serial=self.serial,
            vendor=self.vendor,
            firmware_revision=self.firmware_revision,
            compliance=self.compliance,
            drive_type=self.drive_type,
            rotation_rate=self.rotation_rate,
        )

    def disk_capacity(self) -> DiskCapacity:
        return DiskCapacity(
            storage=self.capacity,
            logical_sector_size=self.logical_sector_size,
            physical_sector_size=self.physical_sector_size,
        )

    def disk_links(self) -> list[DiskDevLink]:
        """Return the by-id and by-path link groups that are not empty."""
        links = []
        if self.by_id_dev_links:
            links.append(DiskDevLink(kind="by-id", links=list(self.by_id_dev_links)))
        if self.by_path_dev_links:
            links.append(DiskDevLink(kind="by-path", links=list(self.by_path_dev_links)))
        return links

    def stats(self) -> DiskStat:
        """Return the changing statistics; temperatures only when valid."""
        stat = DiskStat(
            total_bytes_read=self.total_bytes_read,
            total_bytes_written=self.total_bytes_written,
            device_utilization_rate=self.device_utilization_rate,
            percent_endurance_used=self.percent_endurance_used,
        )
        temp = self.temperature_info
        if temp.temperature_data_valid:
            stat.temp_info = TemperatureStat(
                current_temperature=temp.current_temperature,
                highest_temperature=temp.highest_temperature,
                lowest_temperature=temp.lowest_temperature,
            )
        return stat