[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stackops"
version = "0.1.0"
description = "Helpers for managing OpenStack identity resources and Ceph/volume storage settings"
requires-python = ">=3.10"
keywords = ["openstack", "keystone", "ceph", "volumes", "identity"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["stackops"]

[tool.pytest.ini_options]
addopts = "-ra"
