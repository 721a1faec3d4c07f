# nodedisk

`nodedisk` keeps an inventory of the disks and block devices on a cluster
node. Each device is described as a `Disk` or a `BlockDevice` resource, and the
resources are kept in a resource store. Devices that have gone away are marked
`Inactive`. When the controller shuts down, every device of the node is marked
`Unknown`.

## Modules

- `nodedisk.resources` defines the resource records as dataclasses: `Disk`,
  `DiskList`, `BlockDevice` and `BlockDeviceList`, together with their metadata,
  spec, status and statistics parts. Both `Disk.deep_copy()` and
  `BlockDevice.deep_copy()` return independent copies.
- `nodedisk.diskinfo.DiskInfo` collects what probes learn about a disk.
  `to_disk()` turns it into a `Disk` and `to_partitions()` returns its
  partitions. A filesystem value of `"None"` gives an empty filesystem entry,
  and temperatures are reported only when they are marked valid.
- `nodedisk.deviceinfo.DeviceInfo` describes a block device. `to_device()` turns
  it into a `BlockDevice`, and `DeviceInfo.from_disk_info()` builds one from a
  `DiskInfo`. `disk_to_device_uuid()` maps `disk-xxx` to `blockdevice-xxx`.
- `nodedisk.client.InMemoryClient` is a thread-safe store keyed by kind and name.
  It provides `create`, `get`, `update`, `delete` and `list`, and `list` filters
  by label selector. Objects always go in and come out as copies. Errors are
  raised as `NotFoundError`, `AlreadyExistsError` and `ConflictError`, all
  subclasses of `ClientError`. `update` raises `ConflictError` when the stored
  resource version and the one supplied are both set and differ.
  `parse_label_selector()` understands `=`, `==`, `!=`, `key` and `!key`.
- `nodedisk.diskstore.DiskStoreMixin` and
  `nodedisk.blockdevicestore.BlockDeviceStoreMixin` provide these operations on
  the store:
  - create, update, get, delete and deactivate a resource
  - list the resources of this node
  - push a resource, which updates it when an old copy is given and creates it
    otherwise
  - deactivate stale resources
  - mark every resource of the node unknown

  When a block device is updated, it keeps its claim reference and claim state.
  When stale block devices are deactivated, the sparse files on the node still
  count as present.
- `nodedisk.controller.Controller` combines both stores. It also does the
  following:
  - holds registered filters and probes; probes are kept in priority order
  - runs all enabled probes over a disk with `fill_disk_details()`
  - rejects a disk with `apply_filter()` as soon as one enabled filter rejects
    it
  - loads its configuration with `set_ndm_config()`
  - publishes itself to probes and filters with `broadcast()`, through
    `controller_broadcast_channel`
  - on `run(stop_event)`, waits for the event and then marks every resource
    unknown

  `get_node_name()` and `get_namespace()` read `NODE_NAME` and `NAMESPACE`
  from the environment and raise `LookupError` when either is unset.
- `nodedisk.plugins` defines the abstract `FilterInterface` and
  `ProbeInterface`, the `Filter` and `Probe` wrappers that register them, and
  `EventMessage`.
- `nodedisk.config.load_config()` reads the probe and filter configuration,
  parsing it as JSON when it is valid JSON and as YAML otherwise. It raises
  `OSError` or `ValueError` on failure.
- `nodedisk.sparse` manages sparse image files that stand in for disks during
  testing. It reads these environment variables:
  - `SPARSE_FILE_DIR`: the directory for the files
  - `SPARSE_FILE_SIZE`: the size of each file in bytes; exponent notation is
    accepted, and smaller sizes are raised to 1 GiB
  - `SPARSE_FILE_COUNT`: how many files to create, 1 by default

  `Controller.initialize_sparse_files()` creates or reuses the files and
  publishes each one as an active block device.
- `nodedisk.listing.render_device_list()` formats a `DiskList` as a fixed-width
  table.

## Examples

```python
from nodedisk.deviceinfo import disk_to_device_uuid

disk_to_device_uuid("disk-adb1b23f7ba395988d029d78ef7bda58")
# 'blockdevice-adb1b23f7ba395988d029d78ef7bda58'
```

Record a disk and list the disks of the node:

```python
from nodedisk.controller import Controller
from nodedisk.diskinfo import DiskInfo, ProbeIdentifier
from nodedisk.listing import render_device_list

ctrl = Controller(node_attributes={"hostname": "node-1", "nodename": "node-1"})
info = DiskInfo(probe_identifiers=ProbeIdentifier(uuid="disk-0001"),
                path="/dev/sdb", capacity=10737418240)
ctrl.push_disk_resource(None, info)
print(render_device_list(ctrl.list_disk_resource()))
```

If there are no disks, the listing reads `No disk resource present.`

A configuration file, in YAML:

```yaml
probeconfigs:
  - key: udev-probe
    name: udev probe
    state: true
filterconfigs:
  - key: os-disk-exclude-filter
    name: os disk exclude filter
    state: true
    include: ""
    exclude: /,/etc/hosts,/boot
```

```python
from nodedisk.config import load_config

config = load_config("node-disk-manager.config")
for probe in config.probe_configs:
    print(probe.key, probe.state)   # udev-probe true
```

Sparse file settings:

```python
import os
from nodedisk.sparse import get_sparse_file_size

os.environ["SPARSE_FILE_SIZE"] = "1.073741824e+11"
get_sparse_file_size()   # 107374182400
```

## What it does not do

- It has no command-line program and no daemon.
- It does not connect to a real cluster API server. Resources are kept only in
  `InMemoryClient`.
- It does not discover devices by itself. It has no concrete probes or filters,
  only the interfaces for writing them.