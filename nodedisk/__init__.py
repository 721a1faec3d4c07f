"""Inventory of a node's disks and block devices as Disk and BlockDevice resources."""

__version__ = "0.4.2"