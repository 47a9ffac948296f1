"""Banking domain package.

This package contains the domain model for FinTS session lifecycle:
authentication records, expiry rules, error classification and the ports
to the protocol client and storage.
"""
