"""Text table of the disk resources on a node."""

from __future__ import annotations

from .resources import DiskList

_HTML_ESCAPES = str.maketrans(
    {
        "\0": "\ufffd",
        '"': "&#34;",
        "&": "&amp;",
        "'": "&#39;",
        "+": "&#43;",
        "<": "&lt;",
        ">": "&gt;",
    }
)

_COLUMNS = (
    ("NAME", 45),
    ("PATH", 10),
    ("CAPACITY", 15),
    ("STATUS", 10),
    ("SERIAL", 25),
    ("MODEL", 20),
    ("VENDOR", 20),
)

NO_DISKS_MESSAGE = "No disk resource present."


def _cell(value: object, width: int) -> str:
    return f"{value!s:<{width}}".translate(_HTML_ESCAPES)


def render_device_list(disk_list: DiskList) -> str:
    """Render disks as a table with one line per disk, or a notice when none."""
    if not disk_list.items:
        return NO_DISKS_MESSAGE.translate(_HTML_ESCAPES) + "\n"
    header = "".join(_cell(title, width) for title, width in _COLUMNS)
    rows = []
    for disk in disk_list.items:
        values = (
            disk.object_meta.name,
            disk.spec.path,
            disk.spec.capacity.storage,
            disk.status.state,
            disk.spec.details.serial,
            disk.spec.details.model,
            disk.spec.details.vendor,
        )
        rows.append(
            "".join(_cell(value, width) for value, (_, width) in zip(values, _COLUMNS))
        )
    return header + "\n" + "".join(row + "\n" for row in rows)