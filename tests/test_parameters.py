import dataclasses

import pytest

from telescopes.model.errors import UnsatisfiableTelescopeError
from telescopes.model.parameters import PARAMETER_FIELDS, TelescopeDiff, TelescopeParameters


def test_addition_sums_geometry_keeps_base_thickness_and_diff_twist():
    base = TelescopeParameters(length=1.0, radius=0.5, thickness=0.1, curvature=0.2, twist_from_parent=45.0, torsion=0.3)
    diff = TelescopeDiff(length=0.5, radius=-0.1, thickness=0.7, curvature=0.05, twist_from_parent=30.0, torsion=-0.1)

    result = base + diff

    assert isinstance(result, TelescopeParameters)
    assert result.length == pytest.approx(1.5)
    assert result.radius == pytest.approx(0.4)
    assert result.thickness == 0.1
    assert result.curvature == pytest.approx(0.25)
    assert result.twist_from_parent == 30.0
    assert result.torsion == pytest.approx(0.2)


def test_zero_twist_diff_resets_twist():
    base = TelescopeParameters(1.0, 0.5, 0.1, twist_from_parent=90.0)
    assert (base + TelescopeDiff()).twist_from_parent == 0.0


def test_concrete_plus_concrete_is_a_type_error():
    p = TelescopeParameters(1.0, 0.5, 0.1)
    with pytest.raises(TypeError):
        p + p


def test_diff_plus_concrete_is_a_type_error():
    with pytest.raises(TypeError):
        TelescopeDiff() + TelescopeParameters(1.0, 0.5, 0.1)


def test_records_are_immutable():
    p = TelescopeParameters(1.0, 0.5, 0.1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.radius = 2.0


def test_copy_is_equal_value():
    p = TelescopeParameters(1.0, 0.5, 0.1, 0.2, 15.0, 0.1)
    q = p.copy()
    assert q == p
    assert q is not p


def test_default_child_diff():
    diff = TelescopeDiff.default_child(0.05)
    assert diff.as_tuple() == (0.0, -0.05, 0.05, 0.0, 0.0, 0.0)


def test_tuple_order_matches_field_names():
    p = TelescopeParameters(1.0, 0.5, 0.1, 0.2, 15.0, 0.3)
    assert dict(zip(PARAMETER_FIELDS, p.as_tuple())) == {
        "length": 1.0, "radius": 0.5, "thickness": 0.1,
        "curvature": 0.2, "twist_from_parent": 15.0, "torsion": 0.3,
    }


@pytest.mark.parametrize(
    "params",
    [
        TelescopeParameters(1.0, 0.0, 0.1),
        TelescopeParameters(1.0, -0.2, 0.1),
        TelescopeParameters(-1.0, 0.5, 0.1),
        TelescopeParameters(1.0, 0.5, -0.1),
    ],
)
def test_validate_rejects_impossible_shells(params):
    with pytest.raises(UnsatisfiableTelescopeError, match="Shell 3"):
        params.validate(index=3)


def test_validate_accepts_zero_length_and_thickness():
    TelescopeParameters(0.0, 0.5, 0.0).validate()
