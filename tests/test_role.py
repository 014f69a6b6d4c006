import json
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from stackops.openstack.role import ROLE_NOT_FOUND, RoleMixin
from stackops.openstack.session import (
    AuthOpts,
    NotFoundError,
    OpenStackError,
    ProviderClient,
    ServiceClient,
)

ENDPOINT = "http://keystone.example.com/v3/"


class _Identity(RoleMixin):
    def __init__(self, client) -> None:
        self.client = client


def _provider():
    return ProviderClient(AuthOpts(auth_url="http://keystone.example.com"))


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


def _query(call):
    return parse_qs(urlparse(call.request.url).query)


def _roles(*roles):
    return {"roles": list(roles), "links": {}}


def test_get_role_returns_first_match(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles({"id": "r1", "name": "admin"}))
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    role = identity.get_role("admin")
    assert role["id"] == "r1"
    assert _query(rsps.calls[0]) == {"name": ["admin"]}


def test_get_role_missing_raises(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles())
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    with pytest.raises(NotFoundError, match=ROLE_NOT_FOUND):
        identity.get_role("admin")


def test_create_role_reuses_existing(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles({"id": "r1", "name": "admin"}))
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    assert identity.create_role("admin") == "r1"
    assert len(rsps.calls) == 1


def test_create_role_creates_missing(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles())
    rsps.add(
        responses.POST, ENDPOINT + "roles", json={"role": {"id": "r2", "name": "admin"}}, status=201
    )
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    assert identity.create_role("admin") == "r2"
    assert json.loads(rsps.calls[1].request.body) == {"role": {"name": "admin"}}


def test_create_role_propagates_other_errors(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", status=500, body="boom")
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    with pytest.raises(OpenStackError) as info:
        identity.create_role("admin")
    assert info.value.status_code == 500


def test_assign_user_role_assigns_when_missing(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles({"id": "r1", "name": "admin"}))
    rsps.add(
        responses.GET, ENDPOINT + "role_assignments", json={"role_assignments": [], "links": {}}
    )
    rsps.add(responses.PUT, ENDPOINT + "projects/p1/users/u1/roles/r1", status=204)
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    identity.assign_user_role("admin", "u1", "p1")
    assert _query(rsps.calls[1]) == {
        "scope.project.id": ["p1"],
        "user.id": ["u1"],
        "role.id": ["r1"],
    }
    assert rsps.calls[2].request.method == "PUT"


def test_assign_user_role_skips_existing_assignment(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles({"id": "r1", "name": "admin"}))
    rsps.add(
        responses.GET,
        ENDPOINT + "role_assignments",
        json={"role_assignments": [{"role": {"id": "r1"}}], "links": {}},
    )
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    identity.assign_user_role("admin", "u1", "p1")
    assert [call.request.method for call in rsps.calls] == ["GET", "GET"]


def test_assign_user_domain_role(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles({"id": "r1", "name": "admin"}))
    rsps.add(
        responses.GET, ENDPOINT + "role_assignments", json={"role_assignments": [], "links": {}}
    )
    rsps.add(responses.PUT, ENDPOINT + "domains/d1/users/u1/roles/r1", status=204)
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    identity.assign_user_domain_role("admin", "u1", "d1")
    assert _query(rsps.calls[1])["scope.domain.id"] == ["d1"]
    assert rsps.calls[2].request.url == ENDPOINT + "domains/d1/users/u1/roles/r1"


def test_assign_with_unknown_role_raises(rsps):
    rsps.add(responses.GET, ENDPOINT + "roles", json=_roles())
    identity = _Identity(ServiceClient(_provider(), ENDPOINT))
    with pytest.raises(NotFoundError):
        identity.assign_user_role("admin", "u1", "p1")