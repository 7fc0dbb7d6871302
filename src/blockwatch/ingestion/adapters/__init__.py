"""
Upstream provider adapters.

Each plugin owns its endpoints and payload mappers; the shared base turns
every transport or decode failure into an absent result.
"""
