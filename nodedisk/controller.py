"""The node disk manager controller: filters, probes, sparse files and shutdown."""

from __future__ import annotations

import logging
import os
import posixpath
import threading
from typing import Optional

from .blockdevicestore import BlockDeviceStoreMixin
from .client import InMemoryClient
from .config import CONFIG_FILE_PATH, NodeDiskManagerConfig, load_config
from .constants import HOST_NAME_KEY, NDM_DEFAULT_DISK_TYPE
from .deviceinfo import DeviceInfo
from .diskinfo import DiskInfo
from .diskstore import DiskStoreMixin
from .plugins import Filter, Probe
from .sparse import (
    SPARSE_BLOCK_DEVICE_TYPE,
    SPARSE_FILE_NAME,
    check_and_create_sparse_file,
    get_sparse_block_device_uuid,
    get_sparse_file_count,
    get_sparse_file_dir,
    get_sparse_file_size,
)

logger = logging.getLogger(__name__)


class _BroadcastChannel:
    """Hands the published controller to every reader, waiting until one exists."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._controller: Optional[Controller] = None

    def publish(self, controller: Controller) -> None:
        with self._condition:
            self._controller = controller
            self._condition.notify_all()

    def receive(self, timeout: Optional[float] = None) -> Controller:
        with self._condition:
            if not self._condition.wait_for(
                lambda: self._controller is not None, timeout
            ):
                raise TimeoutError("no controller has been broadcast")
            assert self._controller is not None
            return self._controller


# Probes and filters read the running controller from here.
controller_broadcast_channel = _BroadcastChannel()


def get_node_name() -> str:
    """Return the node name from NODE_NAME; raises LookupError when unset."""
    try:
        return os.environ["NODE_NAME"]
    except KeyError:
        raise LookupError("error getting node name") from None


def get_namespace() -> str:
    """Return the namespace from NAMESPACE; raises LookupError when unset."""
    try:
        return os.environ["NAMESPACE"]
    except KeyError:
        raise LookupError("error getting namespace") from None


class Controller(DiskStoreMixin, BlockDeviceStoreMixin):
    """Keeps the disk and block device resources of one node up to date."""

    def __init__(
        self,
        client: Optional[InMemoryClient] = None,
        node_attributes: Optional[dict[str, str]] = None,
        namespace: str = "",
        ndm_config: Optional[NodeDiskManagerConfig] = None,
    ) -> None:
        self.client = client if client is not None else InMemoryClient()
        self.node_attributes = node_attributes if node_attributes is not None else {}
        self.namespace = namespace
        self.ndm_config = ndm_config
        self.filters: list[Filter] = []
        self.probes: list[Probe] = []
        self._mutex = threading.Lock()

    def lock(self) -> threading.Lock:
        """Return the controller's lock, for use in a with statement."""
        return self._mutex

    def set_ndm_config(self, path: str = CONFIG_FILE_PATH) -> None:
        """Load the probe and filter config; None when it cannot be read."""
        try:
            self.ndm_config = load_config(path)
        except (OSError, ValueError) as exc:
            self.ndm_config = None
            logger.error("unable to set ndm config : %s", exc)

    def broadcast(self) -> None:
        """Make this controller available to probes and filters."""
        controller_broadcast_channel.publish(self)

    def run(self, stop_event: threading.Event) -> None:
        """Wait for the stop event, then mark every resource of this node unknown."""
        logger.info("started the controller")
        stop_event.wait()
        logger.info("changing the state to unknown before shutting down.")
        self.mark_disk_status_to_unknown()
        self.mark_block_device_status_to_unknown()
        logger.info("shutting down the controller")

    def add_new_filter(self, filter_: Filter) -> None:
        with self.lock():
            self.filters.append(filter_)
        logger.info(
            "configured %s : state %s", filter_.name, "Enable" if filter_.state else "Disable"
        )

    def list_filters(self) -> list[Filter]:
        """Return the enabled filters."""
        with self.lock():
            return [f for f in self.filters if f.state]

    def apply_filter(self, disk_info: DiskInfo) -> bool:
        """Return False as soon as an enabled filter rejects the disk."""
        for filter_ in self.list_filters():
            if not filter_.apply_filter(disk_info):
                logger.info("%s ignored by %s", disk_info.uuid, filter_.name)
                return False
        return True

    def add_new_probe(self, probe: Probe) -> None:
        """Register a probe, keeping probes ordered by priority."""
        with self.lock():
            self.probes.append(probe)
            self.probes.sort(key=lambda p: p.priority)
        logger.info(
            "configured %s : state %s", probe.name, "Enable" if probe.state else "Disable"
        )

    def list_probes(self) -> list[Probe]:
        """Return the enabled probes in priority order."""
        with self.lock():
            return [p for p in self.probes if p.state]

    def fill_disk_details(self, disk_info: DiskInfo) -> None:
        """Let every enabled probe fill in details of the disk."""
        disk_info.node_attributes = self.node_attributes
        disk_info.disk_type = NDM_DEFAULT_DISK_TYPE
        disk_info.uuid = disk_info.probe_identifiers.uuid
        for probe in self.list_probes():
            probe.fill_disk_details(disk_info)
            logger.info("details filled by %s", probe.name)

    def initialize_sparse_files(self) -> None:
        """Create or reuse the configured sparse files and publish them."""
        sparse_dir = get_sparse_file_dir()
        size = get_sparse_file_size()
        count = get_sparse_file_count()
        if not sparse_dir or size < 1 or count < 1:
            logger.info("No sparse file path/size provided. Skip creating sparse files.")
            return
        for index in range(count):
            sparse_file = posixpath.normpath(
                posixpath.join(sparse_dir, f"{index}-{SPARSE_FILE_NAME}")
            )
            try:
                check_and_create_sparse_file(sparse_file, size)
            except (OSError, ValueError) as exc:
                logger.info("Error creating sparse file: %s Error: %s", sparse_file, exc)
                continue
            self.mark_sparse_block_device_state_active(sparse_file, size)

    def mark_sparse_block_device_state_active(
        self, sparse_file: str, sparse_file_size: int
    ) -> None:
        """Create or update the active block device of a sparse file."""
        details = DeviceInfo(
            node_attributes=self.node_attributes,
            uuid=get_sparse_block_device_uuid(
                self.node_attributes.get(HOST_NAME_KEY, ""), sparse_file
            ),
            namespace=self.namespace,
            device_type=SPARSE_BLOCK_DEVICE_TYPE,
            path=sparse_file,
        )
        try:
            details.capacity = os.stat(sparse_file).st_size
        except OSError as exc:
            logger.info("Error fetching the size of sparse file: %s", exc)
            logger.error("Failed to create a block device CR for sparse file: %s", sparse_file)
            return
        logger.info("Updating the BlockDevice CR for Sparse file: %s", details.uuid)
        self.create_block_device(details.to_device())

    def new_device_info_from_disk_info(self, disk_info: DiskInfo) -> DeviceInfo:
        """Build block device details from the details of a disk."""
        return DeviceInfo.from_disk_info(disk_info)