"""Filters and probes that plug into the controller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .diskinfo import DiskInfo


class FilterInterface(ABC):
    """A filter that decides whether a disk should be processed."""

    @abstractmethod
    def start(self) -> None:
        """Prepare the filter for use."""

    @abstractmethod
    def include(self, disk_info: DiskInfo) -> bool:
        """Return True if the disk matches the include values."""

    @abstractmethod
    def exclude(self, disk_info: DiskInfo) -> bool:
        """Return True if the disk does not match the exclude values."""


class ProbeInterface(ABC):
    """A probe that fills in details of a disk."""

    @abstractmethod
    def start(self) -> None:
        """Prepare the probe for use."""

    @abstractmethod
    def fill_disk_details(self, disk_info: DiskInfo) -> None:
        """Fill in the details this probe knows about the disk."""


@dataclass(eq=False)
class Filter:
    """A registered filter with its name and whether it is enabled."""

    name: str
    state: bool
    interface: FilterInterface

    def apply_filter(self, disk_info: DiskInfo) -> bool:
        """Return True if the disk passes both the include and the exclude check."""
        return self.interface.include(disk_info) and self.interface.exclude(disk_info)

    def start(self) -> None:
        self.interface.start()


@dataclass(eq=False)
class Probe:
    """A registered probe with its priority, name and whether it is enabled."""

    name: str
    state: bool
    interface: ProbeInterface
    priority: int = 0

    def start(self) -> None:
        self.interface.start()

    def fill_disk_details(self, disk_info: DiskInfo) -> None:
        self.interface.fill_disk_details(disk_info)


@dataclass
class EventMessage:
    """An event such as attach or detach, with the disks it concerns."""

    action: str = ""
    devices: list[DiskInfo] = field(default_factory=list)