import pytest

from stackops.storage.volumes import (
    PropagationType,
    VolMounts,
    Volume,
    VolumeConversionError,
    VolumeSource,
    can_propagate,
)


def _sample() -> VolMounts:
    volume = Volume(name="data", volume_source=VolumeSource(host_path={"path": "/srv"}))
    mount = {"name": "data", "mountPath": "/srv"}
    return VolMounts(volumes=[volume], mounts=[mount])


def test_can_propagate_everywhere():
    assert can_propagate(PropagationType.EVERYWHERE, []) is True
    assert can_propagate("All", ["x"]) is True


def test_can_propagate_matching_service():
    assert can_propagate(PropagationType.DB_SYNC, ["DBSync"]) is True
    assert can_propagate("custom", ["other", "custom"]) is True


def test_can_propagate_no_match():
    assert can_propagate(PropagationType.COMPUTE, ["DBSync"]) is False


def test_propagate_without_policy_returns_one():
    vm = _sample()
    result = vm.propagate(["anything"])
    assert len(result) == 1
    assert result[0].volumes == vm.volumes
    assert result[0].mounts == vm.mounts
    assert result[0].propagation == []


def test_propagate_filters_by_service():
    vm = _sample()
    vm.propagation = [PropagationType.COMPUTE]
    assert vm.propagate([PropagationType.DB_SYNC]) == []
    assert len(vm.propagate([PropagationType.COMPUTE])) == 1


def test_propagate_one_entry_per_matching_policy():
    vm = _sample()
    vm.propagation = [PropagationType.EVERYWHERE, PropagationType.DB_SYNC, "other"]
    result = vm.propagate(["DBSync"])
    assert len(result) == 2
    assert all(entry.volumes == vm.volumes for entry in result)


def test_core_volume_source_uses_json_keys():
    source = VolumeSource(config_map={"name": "cm"}, downward_api={"items": []})
    core = source.to_core_volume_source()
    assert core == {"configMap": {"name": "cm"}, "downwardAPI": {"items": []}}


def test_core_volume_source_is_a_copy():
    inner = {"path": "/srv"}
    core = VolumeSource(host_path=inner).to_core_volume_source()
    core["hostPath"]["path"] = "/changed"
    assert inner["path"] == "/srv"


def test_core_volume_source_rejects_unserializable():
    with pytest.raises(VolumeConversionError, match="error marshalling VolumeSource"):
        VolumeSource(csi={"bad": object()}).to_core_volume_source()


def test_core_volume_source_rejects_non_object():
    with pytest.raises(VolumeConversionError, match="error unmarshalling VolumeSource"):
        VolumeSource(nfs="server").to_core_volume_source()


def test_core_volume_inlines_source():
    volume = Volume(name="data", volume_source=VolumeSource(empty_dir={}))
    assert volume.to_core_volume() == {"name": "data", "emptyDir": {}}


def test_volume_dict_round_trip():
    volume = Volume(
        name="data",
        volume_source=VolumeSource(persistent_volume_claim={"claimName": "pvc"}),
    )
    assert Volume.from_dict(volume.to_dict()) == volume


def test_volmounts_dict_round_trip():
    vm = _sample()
    vm.propagation = ["DBSync"]
    vm.extra_vol_type = "Ceph"
    data = vm.to_dict()
    assert data["propagation"] == ["DBSync"]
    assert VolMounts.from_dict(data) == vm


def test_volmounts_dict_omits_empty_optional_fields():
    data = _sample().to_dict()
    assert "propagation" not in data
    assert "extraVolType" not in data