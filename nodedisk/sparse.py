"""Sparse files that stand in for disks when testing the node disk manager.

When SPARSE_FILE_DIR names a directory, SPARSE_FILE_COUNT files of
SPARSE_FILE_SIZE bytes are created there and each is published as a
block device.
"""

from __future__ import annotations

import hashlib
import logging
import os
import posixpath
import re

logger = logging.getLogger(__name__)

ENV_SPARSE_FILE_DIR = "SPARSE_FILE_DIR"
ENV_SPARSE_FILE_SIZE = "SPARSE_FILE_SIZE"
ENV_SPARSE_FILE_COUNT = "SPARSE_FILE_COUNT"

SPARSE_FILE_NAME = "ndm-sparse.img"
SPARSE_FILE_DEFAULT_SIZE = 1073741824
SPARSE_FILE_MIN_SIZE = 1073741824
SPARSE_FILE_DEFAULT_COUNT = "1"

SPARSE_BLOCK_DEVICE_TYPE = "sparse"
SPARSE_BLOCK_DEVICE_PREFIX = "sparse-"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def get_sparse_file_dir() -> str:
    """Return the sparse file directory, or "" when unset or not a directory."""
    sparse_dir = os.environ.get(ENV_SPARSE_FILE_DIR, "")
    if not sparse_dir:
        return ""
    if not os.path.isdir(sparse_dir):
        logger.info("Specified directory doesnt exist: %s", sparse_dir)
        return ""
    return sparse_dir


def get_sparse_file_count() -> int:
    """Return the number of sparse files to create; 0 when the count is invalid."""
    count = os.environ.get(ENV_SPARSE_FILE_COUNT, "") or SPARSE_FILE_DEFAULT_COUNT
    if not _INTEGER.fullmatch(count):
        logger.info("Error converting sparse file count: %s", count)
        return 0
    return int(count)


def get_sparse_file_size() -> int:
    """Return the sparse file size in bytes; 0 when the size is invalid.

    Sizes below the minimum are raised to the minimum.
    """
    size_text = os.environ.get(ENV_SPARSE_FILE_SIZE, "")
    if not size_text:
        logger.info("No size was specified. Using default size: %d",
                    SPARSE_FILE_DEFAULT_SIZE)
        return SPARSE_FILE_DEFAULT_SIZE
    try:
        size = int(float(size_text.strip()))
    except (ValueError, OverflowError) as exc:
        logger.error("Error converting sparse file size: %s", exc)
        return 0
    if size < SPARSE_FILE_MIN_SIZE:
        logger.info("%s is less than minimum required. Setting the size to: %d",
                    size_text, SPARSE_FILE_MIN_SIZE)
        return SPARSE_FILE_MIN_SIZE
    return size


def create_sparse_file(path: str, size: int) -> None:
    """Create a sparse file of the given size, replacing any existing file."""
    if size < 0:
        raise ValueError(f"sparse file size must not be negative: {size}")
    with open(path, "wb") as handle:
        handle.truncate(size)


def check_and_create_sparse_file(path: str, size: int) -> None:
    """Reuse an existing sparse file, or create it when it does not exist."""
    if os.path.exists(path):
        logger.info("Sparse file already exists: %s", os.path.basename(path))
        return
    logger.info("Creating a new Sparse file: %s", path)
    create_sparse_file(path, size)


def get_sparse_block_device_uuid(hostname: str, sparse_file: str) -> str:
    """Return the fixed UUID of a sparse file's block device on a node."""
    return SPARSE_BLOCK_DEVICE_PREFIX + _hash(hostname + sparse_file)


def get_active_sparse_block_devices_uuid(hostname: str) -> list[str]:
    """Return the UUIDs of the sparse files present on this node, by file name."""
    location = get_sparse_file_dir()
    try:
        names = sorted(os.listdir(location))
    except OSError as exc:
        logger.error("Failed to read sparse file names : %s", exc)
        return []
    return [
        get_sparse_block_device_uuid(
            hostname, posixpath.normpath(posixpath.join(location, name))
        )
        for name in names
        if name.endswith(SPARSE_FILE_NAME)
    ]