import pytest
import responses

from stackops.openstack.session import (
    AuthOpts,
    OpenStackError,
    ProviderClient,
    ServiceClient,
)
from stackops.openstack.volume import VolumeMixin

ENDPOINT = "http://cinder.example.com/v3/project/"


class _Volume(VolumeMixin):
    def __init__(self, client) -> None:
        self.client = client


def _provider():
    return ProviderClient(AuthOpts(auth_url="http://keystone.example.com"))


@pytest.fixture
def rsps():
    with responses.RequestsMock() as mock:
        yield mock


def _services(*services):
    return {"services": list(services)}


def test_running_service_is_found(rsps):
    rsps.add(
        responses.GET,
        ENDPOINT + "os-services",
        json=_services(
            {"binary": "cinder-scheduler", "state": "up", "status": "enabled"},
            {"binary": "cinder-backup", "state": "up", "status": "enabled"},
        ),
    )
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    assert volume.volume_service_check("cinder-backup") is True


def test_down_service_is_not_running(rsps):
    rsps.add(
        responses.GET,
        ENDPOINT + "os-services",
        json=_services({"binary": "cinder-backup", "state": "down", "status": "enabled"}),
    )
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    assert volume.volume_service_check("cinder-backup") is False


def test_disabled_service_is_not_running(rsps):
    rsps.add(
        responses.GET,
        ENDPOINT + "os-services",
        json=_services({"binary": "cinder-backup", "state": "up", "status": "disabled"}),
    )
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    assert volume.volume_service_check("cinder-backup") is False


def test_binary_substring_matches(rsps):
    rsps.add(
        responses.GET,
        ENDPOINT + "os-services",
        json=_services({"binary": "cinder-volume", "state": "up", "status": "enabled"}),
    )
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    assert volume.volume_service_check("volume") is True


def test_no_services(rsps):
    rsps.add(responses.GET, ENDPOINT + "os-services", json=_services())
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    assert volume.volume_service_check("cinder-volume") is False


def test_listing_error_raises(rsps):
    rsps.add(responses.GET, ENDPOINT + "os-services", status=500, body="boom")
    volume = _Volume(ServiceClient(_provider(), ENDPOINT))
    with pytest.raises(OpenStackError) as info:
        volume.volume_service_check("cinder-volume")
    assert info.value.status_code == 500