"""Core reconciliation logic for uamount.

Stores for fstab and udev rules, the backup manager, the confirmation
gate and the Reconciler that coordinates them.
"""
