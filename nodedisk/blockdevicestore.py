"""Storing, updating and listing block device resources for this node."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .client import AlreadyExistsError, ClientError, ConflictError, InMemoryClient
from .constants import (
    FALSE_STRING,
    HOST_NAME_KEY,
    KUBERNETES_HOST_NAME_LABEL,
    NDM_BLOCK_DEVICE_KIND,
    NDM_INACTIVE,
    NDM_MANAGED_KEY,
    NDM_UNKNOWN,
    NDM_VERSION,
)
from .deviceinfo import DeviceInfo
from .resources import BlockDevice, BlockDeviceList, TypeMeta
from .sparse import get_active_sparse_block_devices_uuid

logger = logging.getLogger(__name__)


class BlockDeviceStoreMixin:
    """Block device resource operations for a controller.

    The class using it provides ``client``, the resource client, and
    ``node_attributes``, the attributes of the node it runs on. Its
    ``namespace`` is given to the block devices it pushes.
    """

    client: InMemoryClient
    node_attributes: dict[str, str]
    namespace: str = ""

    def create_block_device(self, block_device: BlockDevice) -> None:
        """Create the block device resource, or update it when it already exists.

        Failures are logged, not raised.
        """
        try:
            self.client.create(block_device)
        except AlreadyExistsError:
            pass
        except ClientError as exc:
            logger.error("Creation of blockdevice object failed: %s", exc)
            return
        else:
            logger.info("Created blockdevice object in etcd: %s", block_device.name)
            return

        # The device may have moved here from another node; update its owner.
        try:
            self.update_block_device(block_device, None)
            return
        except ConflictError:
            pass
        except ClientError as exc:
            logger.error("Updating of BlockDevice Object failed: %s", exc)
            return

        # Someone else changed it meanwhile; try once more.
        try:
            self.update_block_device(block_device, None)
        except ClientError:
            logger.error("Update to blockdevice object failed: %s", block_device.name)

    def update_block_device(
        self, block_device: BlockDevice, old_block_device: Optional[BlockDevice]
    ) -> None:
        """Replace the stored block device, keeping its version and claim.

        When ``old_block_device`` is None the stored resource is read first.
        Raises ClientError when the resource cannot be read or updated.
        """
        device_copy = block_device.deep_copy()
        if old_block_device is None:
            try:
                old_block_device = self.client.get(BlockDevice.KIND, block_device.name)
            except ClientError as exc:
                logger.error(
                    "Unable to get blockdevice object:%s, err:%s",
                    block_device.name,
                    exc,
                )
                raise
        device_copy.object_meta.resource_version = (
            old_block_device.object_meta.resource_version
        )
        device_copy.spec.claim_ref = old_block_device.spec.claim_ref
        device_copy.status.claim_state = old_block_device.status.claim_state
        try:
            self.client.update(device_copy)
        except ClientError as exc:
            logger.error("Unable to update blockdevice object : %s", exc)
            raise
        logger.info("Updated blockdevice object : %s", block_device.name)

    def deactivate_block_device(self, block_device: BlockDevice) -> None:
        """Mark the block device inactive; failures are logged."""
        device_copy = block_device.deep_copy()
        device_copy.status.state = NDM_INACTIVE
        try:
            self.client.update(device_copy)
        except ClientError as exc:
            logger.error("Unable to deactivate blockdevice: %s", exc)
            return
        logger.info("Deactivated blockdevice: %s", block_device.name)

    def get_block_device(self, name: str) -> BlockDevice:
        """Return the stored block device; raises NotFoundError if absent."""
        try:
            device = self.client.get(BlockDevice.KIND, name)
        except ClientError as exc:
            logger.error("Unable to get blockdevice object : %s", exc)
            raise
        logger.info("Got blockdevice object : %s", name)
        return device

    def delete_block_device(self, name: str) -> None:
        """Delete the block device resource; failures are logged."""
        try:
            self.client.delete(BlockDevice.KIND, name)
        except ClientError as exc:
            logger.error("Unable to delete blockdevice object : %s", exc)
            return
        logger.info("Deleted blockdevice object : %s", name)

    def list_block_device_resource(self) -> BlockDeviceList:
        """Return the managed block device resources of this node."""
        selector = (
            f"{KUBERNETES_HOST_NAME_LABEL}={self.node_attributes.get(HOST_NAME_KEY, '')},"
            f"{NDM_MANAGED_KEY}!={FALSE_STRING}"
        )
        return BlockDeviceList(
            type_meta=TypeMeta(kind=NDM_BLOCK_DEVICE_KIND, api_version=NDM_VERSION),
            items=self.client.list(BlockDevice.KIND, selector),
        )

    def get_existing_block_device_resource(
        self, device_list: BlockDeviceList, uuid: str
    ) -> Optional[BlockDevice]:
        """Return the block device named ``uuid`` from the list, or None."""
        return next((item for item in device_list.items if item.name == uuid), None)

    def deactivate_stale_block_device_resource(self, devices: Iterable[str]) -> None:
        """Deactivate stored block devices of this node no longer present.

        Devices in ``devices`` and the sparse files on this node count as present.
        """
        present = set(devices)
        present.update(
            get_active_sparse_block_devices_uuid(
                self.node_attributes.get(HOST_NAME_KEY, "")
            )
        )
        try:
            device_list = self.list_block_device_resource()
        except (ClientError, ValueError) as exc:
            logger.error("%s", exc)
            return
        for item in device_list.items:
            if item.name not in present:
                self.deactivate_block_device(item)

    def push_block_device_resource(
        self, old_block_device: Optional[BlockDevice], device_details: DeviceInfo
    ) -> None:
        """Update the block device when ``old_block_device`` is given, else create it."""
        device_details.node_attributes = self.node_attributes
        device_details.namespace = self.namespace
        device = device_details.to_device()
        if old_block_device is not None:
            try:
                self.update_block_device(device, old_block_device)
            except ClientError:
                pass
            return
        self.create_block_device(device)

    def mark_block_device_status_to_unknown(self) -> None:
        """Set every block device of this node to the unknown state."""
        try:
            device_list = self.list_block_device_resource()
        except (ClientError, ValueError) as exc:
            logger.error("%s", exc)
            return
        for item in device_list.items:
            item.status.state = NDM_UNKNOWN
            try:
                self.client.update(item)
            except ClientError as exc:
                logger.error("Unable to mark blockdevice object unknown : %s", exc)
                continue
            logger.info("Status marked unknown for blockdevice object: %s", item.name)