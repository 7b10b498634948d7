"""
ib_guid_provisioner

This package assigns GUIDs to SR-IOV virtual functions on InfiniBand PFs.

We keep modules small and well separated:
core contains the GUID type, shared records and errors
config contains settings and the GUID config loader
host contains the link, binder and PCI resolver interfaces
pool contains the read only GUID lookup
provisioner contains the top level orchestration with random fallback
"""
