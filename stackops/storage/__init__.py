"""Ceph client settings and extra volume propagation."""