"""Helpers for OpenStack identity resources and Ceph/volume storage settings."""

__version__ = "0.1.0"