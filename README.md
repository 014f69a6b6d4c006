# stackops

Helpers for services that manage OpenStack identity resources and Ceph
storage settings.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Storage helpers

### Ceph settings

`stackops.storage.ceph` works out Ceph client settings:

```python
from stackops.storage.ceph import PoolSpec, get_pool, get_osd_caps, get_rbd_user, validate_mons

pools = {"cinder": PoolSpec("volumes"), "nova": PoolSpec("vms")}
get_pool(pools, "cinder")          # "volumes" (the configured pool)
get_pool(pools, "glance")          # "images" (the default for glance)
get_osd_caps(pools)                # "profile rbd pool=vms,profile rbd pool=volumes"
get_osd_caps({})                   # "profile rbd pool=volumes"
get_rbd_user("")                   # "openstack"
validate_mons("192.168.2.2, 192.168.2.3")  # True
validate_mons("192.168.2.2,192.168.2")     # False
```

The services with a default pool are `cinder`, `backup`, `nova` and `glance`
(see `Defaults`). `get_pool` raises `NoDefaultPoolError` for any other service
that has no configured pool. `get_osd_caps` lists the pools sorted by name, so
the result does not depend on the order of the mapping.

`Backend` holds the parameters of an external cluster and converts to and
from its JSON form (`cephFsid`, `cephMons`, `cephClientKey`, `cephUser`,
`cephPools`) with `Backend.from_dict` and `Backend.to_dict`.

### Extra volumes

`stackops.storage.volumes` describes extra volumes and mounts and which
services should receive them:

```python
from stackops.storage.volumes import PropagationType, VolMounts, Volume, VolumeSource

extra = VolMounts(
    propagation=[PropagationType.COMPUTE],
    volumes=[Volume("data", VolumeSource(host_path={"path": "/srv/data"}))],
    mounts=[{"name": "data", "mountPath": "/var/lib/data"}],
)
extra.propagate([PropagationType.COMPUTE])   # one VolMounts for each matching policy
extra.propagate(["DBSync"])                  # []
```

A `VolMounts` without a propagation policy is handed to every caller;
`PropagationType.EVERYWHERE` ("All") matches any service. Any plain string
can name a service as well.

Volume sources are plain JSON-shaped dictionaries. `Volume.to_core_volume()`
returns an independent copy in that form, e.g.
`{"name": "data", "hostPath": {"path": "/srv/data"}}`, and raises
`VolumeConversionError` when a source cannot be converted.

## OpenStack helpers

`stackops.openstack.client.new_openstack` authenticates against Keystone v3
with password credentials and returns an `OpenStack` object bound to the
internal identity endpoint of the configured region:

```python
from stackops.openstack.client import new_openstack
from stackops.openstack.endpoint import Endpoint
from stackops.openstack.service import Service
from stackops.openstack.session import AuthOpts, Availability

password = "password"
os_client = new_openstack(AuthOpts(
    auth_url="https://keystone.example.com:5000/v3",
    username="admin",
    password=password,
    tenant_name="admin",
    domain_name="Default",
    region="regionOne",
))

service_id = os_client.create_service(
    Service(name="glance", type="image", description="Image", enabled=True)
)
os_client.create_endpoint(Endpoint(
    name="glance",
    service_id=service_id,
    availability=Availability.PUBLIC,
    url="https://glance.example.com",
))
```

The `OpenStack` object offers:

- domains: `create_domain`
- projects: `create_project`, `get_project`
- users: `create_user`, `get_user`, `delete_user`
- roles: `create_role`, `get_role`, `assign_user_role`, `assign_user_domain_role`
- services: `create_service`, `get_service`, `update_service`, `delete_service`
- endpoints: `create_endpoint`, `get_endpoints`, `update_endpoint`, `delete_endpoint`
- limits: `create_limit`, `create_or_update_registered_limit`,
  `get_registered_limit`, `delete_registered_limit`,
  `list_registered_limits_by_resource_name`, `list_registered_limits_by_service_id`
- block storage: `volume_service_check`

Create calls look the resource up first and return the existing ID. For
domains, projects, users and limits more than one match raises
`OpenStackError`; for roles and services the first match is used. Role
assignments are only made when the user does not already hold the role.
`create_or_update_registered_limit` updates the default limit of an existing
registered limit. Deleting a missing user or service is not an error.

Failed API calls raise `OpenStackError` (with the HTTP `status_code` when
there is one); a 404 and a missing named resource raise `NotFoundError`.
`get_availability` maps "admin", "internal" and "public" to `Availability`
and raises `ValueError` for anything else.

`get_nova_openstack_client(cfg, endpoint_opts)` returns an `OpenStack` object
bound to the compute endpoint; `endpoint_opts` may give `region`,
`availability` (public by default) and `type`.

`volume_service_check` lists `os-services`, so it needs an `OpenStack` bound to
a block-storage endpoint. Build one from a provider:

```python
from stackops.openstack.client import OpenStack
from stackops.openstack.session import ServiceClient, get_openstack_provider

provider = get_openstack_provider(cfg)
url = provider.endpoint_url("volumev3", cfg.region, "public")
volume_client = OpenStack(ServiceClient(provider, url), cfg.region, cfg.auth_url)
volume_client.volume_service_check("cinder-volume")
```

`AuthOpts.tls` takes a `TLSConfig` with CA certificates (PEM text), an
`insecure` switch and a client certificate and key file. Requests time out
after 10 seconds. Progress is reported through the standard `logging` module.

## What the package does not do

There is no command-line program. The package does not talk to a Kubernetes
cluster: volumes and mounts are plain data to hand to whatever creates the
pods. Tokens are not renewed when they expire; authenticate again with
`ProviderClient.authenticate()`.