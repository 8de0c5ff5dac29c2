import pytest

from fortiexporter.version import parse_version


def test_parse_ok():
    assert parse_version("v6.4.4") == (6, 4)


def test_parse_later_release():
    assert parse_version("v7.2.5") == (7, 2)


@pytest.mark.parametrize("ver", ["1.0.0", "", "v7", "v7.0", "vx.y.z"])
def test_parse_fails(ver):
    with pytest.raises(ValueError):
        parse_version(ver)