"""Keystone v3 identity, limits, compute endpoint and block-storage service helpers."""