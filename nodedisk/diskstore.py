"""Storing, updating and listing disk resources for this node."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .client import ClientError, InMemoryClient
from .constants import (
    FALSE_STRING,
    HOST_NAME_KEY,
    KUBERNETES_HOST_NAME_LABEL,
    NDM_DISK_KIND,
    NDM_INACTIVE,
    NDM_MANAGED_KEY,
    NDM_UNKNOWN,
    NDM_VERSION,
)
from .diskinfo import DiskInfo
from .resources import Disk, DiskList, TypeMeta

logger = logging.getLogger(__name__)


class DiskStoreMixin:
    """Disk resource operations for a controller.

    The class using it provides ``client``, the resource client, and
    ``node_attributes``, the attributes of the node it runs on.
    """

    client: InMemoryClient
    node_attributes: dict[str, str]

    def create_disk(self, disk: Disk) -> None:
        """Create the disk resource, or take it over when it already exists.

        Failures are logged, not raised.
        """
        try:
            self.client.create(disk)
        except ClientError:
            pass
        else:
            logger.info("Created disk object in etcd : %s", disk.name)
            return

        # The disk may have moved here from another node; take it over.
        try:
            self.update_disk(disk, None)
            return
        except ClientError as exc:
            logger.info(
                "disk status updated by other node, changing the ownership "
                "to this node : %s",
                exc,
            )
        try:
            self.update_disk(disk, None)
        except ClientError:
            return
        logger.info("updated disk object in etcd : %s", disk.name)

    def update_disk(self, disk: Disk, old_disk: Optional[Disk]) -> None:
        """Replace the stored disk resource, keeping its resource version.

        When ``old_disk`` is None the stored resource is read first. Raises
        ClientError when the resource cannot be read or updated.
        """
        disk_copy = disk.deep_copy()
        if old_disk is None:
            try:
                old_disk = self.client.get(Disk.KIND, disk.name)
            except ClientError as exc:
                logger.error("Unable to get disk object:%s, err:%s", disk.name, exc)
                raise
        disk_copy.object_meta.resource_version = old_disk.object_meta.resource_version
        try:
            self.client.update(disk_copy)
        except ClientError as exc:
            logger.error("Unable to update disk object:%s, err:%s", disk.name, exc)
            raise
        logger.info("Updated disk object::%s successfully", disk.name)

    def deactivate_disk(self, disk: Disk) -> None:
        """Mark the disk resource inactive; failures are logged."""
        disk_copy = disk.deep_copy()
        disk_copy.status.state = NDM_INACTIVE
        try:
            self.client.update(disk_copy)
        except ClientError as exc:
            logger.error("Unable to deactivate disk object : %s", exc)
            return
        logger.info("deactivate the disk object : %s", disk.name)

    def get_disk(self, name: str) -> Disk:
        """Return the stored disk resource; raises NotFoundError if absent."""
        try:
            disk = self.client.get(Disk.KIND, name)
        except ClientError as exc:
            logger.error("Unable to get disk object : %s", exc)
            raise
        logger.info("Got disk object : %s", name)
        return disk

    def delete_disk(self, name: str) -> None:
        """Delete the disk resource; failures are logged."""
        try:
            self.client.delete(Disk.KIND, name)
        except ClientError as exc:
            logger.error("Unable to delete disk object : %s", exc)
            return
        logger.info("Deleted disk object : %s", name)

    def list_disk_resource(self) -> DiskList:
        """Return the managed disk resources of this node."""
        selector = (
            f"{KUBERNETES_HOST_NAME_LABEL}={self.node_attributes.get(HOST_NAME_KEY, '')},"
            f"{NDM_MANAGED_KEY}!={FALSE_STRING}"
        )
        return DiskList(
            type_meta=TypeMeta(kind=NDM_DISK_KIND, api_version=NDM_VERSION),
            items=self.client.list(Disk.KIND, selector),
        )

    def get_existing_disk_resource(
        self, disk_list: DiskList, uuid: str
    ) -> Optional[Disk]:
        """Return the disk named ``uuid`` from the list, or None."""
        return next((item for item in disk_list.items if item.name == uuid), None)

    def deactivate_stale_disk_resource(self, disks: Iterable[str]) -> None:
        """Deactivate stored disks of this node that are not among ``disks``."""
        present = set(disks)
        try:
            disk_list = self.list_disk_resource()
        except (ClientError, ValueError) as exc:
            logger.error("%s", exc)
            return
        for item in disk_list.items:
            if item.name not in present:
                self.deactivate_disk(item)

    def push_disk_resource(
        self, old_disk: Optional[Disk], disk_details: DiskInfo
    ) -> None:
        """Update the disk resource when ``old_disk`` is given, else create it."""
        disk_details.uuid = disk_details.probe_identifiers.uuid
        disk_details.node_attributes = self.node_attributes
        disk = disk_details.to_disk()
        if old_disk is not None:
            try:
                self.update_disk(disk, old_disk)
            except ClientError:
                pass
            return
        self.create_disk(disk)

    def mark_disk_status_to_unknown(self) -> None:
        """Set every disk resource of this node to the unknown state."""
        try:
            disk_list = self.list_disk_resource()
        except (ClientError, ValueError) as exc:
            logger.error("%s", exc)
            return
        for item in disk_list.items:
            item.status.state = NDM_UNKNOWN
            try:
                self.client.update(item)
            except ClientError as exc:
                logger.error("Unable to mark disk object unknown : %s", exc)
                continue
            logger.info("updated disk object : %s", item.name)