"""uamount - udev automount provisioning for removable block devices.

Keeps /etc/fstab and the udev rule store in agreement about which
devices are automounted and where.
"""

__version__ = "1.0.0"
