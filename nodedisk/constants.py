"""Names, labels and states shared by the node disk manager."""

FALSE_STRING = "false"
TRUE_STRING = "true"

NDM_DISK_KIND = "Disk"
NDM_BLOCK_DEVICE_KIND = "BlockDevice"

KUBERNETES_LABEL_PREFIX = "kubernetes.io/"
OPENEBS_LABEL_PREFIX = "openebs.io/"

HOST_NAME_KEY = "hostname"
NODE_NAME_KEY = "nodename"
KUBERNETES_HOST_NAME_LABEL = KUBERNETES_LABEL_PREFIX + HOST_NAME_KEY

NDM_VERSION = OPENEBS_LABEL_PREFIX + "v1alpha1"

NDM_NOT_PARTITIONED = "No"
NDM_PARTITIONED = "Yes"

NDM_ACTIVE = "Active"
NDM_INACTIVE = "Inactive"
NDM_UNKNOWN = "Unknown"

NDM_DISK_TYPE_KEY = "ndm.io/disk-type"
NDM_DEVICE_TYPE_KEY = "ndm.io/blockdevice-type"
NDM_MANAGED_KEY = "ndm.io/managed"

NDM_DEFAULT_DISK_TYPE = "disk"
NDM_DEFAULT_DEVICE_TYPE = "blockdevice"

NDM_DISK_PREFIX = "disk-"
NDM_BLOCK_DEVICE_PREFIX = "blockdevice-"

BLOCK_DEVICE_UNCLAIMED = "Unclaimed"

# Seconds to wait before checking again for a resource definition.
CRD_RETRY_INTERVAL = 10.0