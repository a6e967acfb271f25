import pytest

from signaling import constants


def test_defaults_are_valid():
    assert constants.validate_config() is True


@pytest.mark.parametrize("size", [1, 51])
def test_room_size_outside_range_is_rejected(monkeypatch, size):
    monkeypatch.setattr(constants, "MAX_ROOM_SIZE", size)

    with pytest.raises(ValueError, match="MAX_ROOM_SIZE"):
        constants.validate_config()


@pytest.mark.parametrize("size", [2, 50])
def test_room_size_bounds_are_inclusive(monkeypatch, size):
    monkeypatch.setattr(constants, "MAX_ROOM_SIZE", size)

    assert constants.validate_config() is True


def test_bad_port_is_rejected(monkeypatch):
    monkeypatch.setattr(constants, "PORT", 70000)

    with pytest.raises(ValueError, match="port"):
        constants.validate_config()


def test_rate_limit_values_must_be_positive(monkeypatch):
    monkeypatch.setattr(constants, "RATE_LIMIT_MAX_EVENTS", 0)

    with pytest.raises(ValueError, match="RATE_LIMIT_MAX_EVENTS"):
        constants.validate_config()
