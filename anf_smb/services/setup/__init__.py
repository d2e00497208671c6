"""Setup (provisioning) services.

This package contains orchestration helpers that *provision* and *tear down*
the Azure NetApp Files resources used by the sample (account, capacity pool,
SMB volume).
"""
