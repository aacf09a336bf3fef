import pytest

from src.ratequote.errors import GeocodeError
from src.ratequote.services.cache import TTLCache
from src.ratequote.services.geospatial import (
    ROAD_FACTOR,
    bounding_box,
    contains,
    haversine_miles,
    interpolate,
    road_distance_estimate,
)
from src.ratequote.services.routing.geocoding import _split_city_state, offline_geocode
from src.ratequote.services.routing.state_locator import derive_states, locate_state, straight_path

CHICAGO = (41.8781, -87.6298)
LOS_ANGELES = (34.0522, -118.2437)


def test_haversine_chicago_to_los_angeles():
    miles = haversine_miles(*CHICAGO, *LOS_ANGELES)
    assert 1730 < miles < 1760
    assert road_distance_estimate(*CHICAGO, *LOS_ANGELES) == pytest.approx(miles * ROAD_FACTOR)


def test_interpolate_includes_both_endpoints():
    points = list(interpolate(*CHICAGO, *LOS_ANGELES, step_miles=100))
    assert points[0] == CHICAGO
    assert points[-1] == pytest.approx(LOS_ANGELES)
    assert len(points) >= 18


def test_bounding_box_covers_its_edges():
    shape = bounding_box(40.0, 42.0, -90.0, -87.0)
    assert contains(shape, 41.0, -88.0)
    assert contains(shape, 42.0, -87.0)
    assert not contains(shape, 43.0, -88.0)


def test_locate_state_prefers_hint_on_overlap():
    assert locate_state(*CHICAGO) == "IL"
    assert locate_state(0.0, 0.0) is None


def test_derive_states_pins_endpoints_and_sums_to_total():
    traversal = derive_states(straight_path(CHICAGO, LOS_ANGELES), 2000.0, "IL", "CA")

    assert traversal.states[0] == "IL"
    assert traversal.states[-1] == "CA"
    assert len(set(traversal.states)) == len(traversal.states)
    assert sum(traversal.miles_by_state.values()) == pytest.approx(2000.0, abs=0.5)
    assert all(miles >= 0 for miles in traversal.miles_by_state.values())


def test_derive_states_splits_evenly_when_geometry_is_off_map():
    traversal = derive_states([(0.0, 0.0), (0.0, 1.0)], 100.0, "IL", "CA")
    assert traversal.states == ("IL", "CA")
    assert traversal.miles_by_state == {"IL": 50.0, "CA": 50.0}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_ttl_cache_evicts_lazily_on_read():
    clock = FakeClock()
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("IL", 3.85)

    clock.now = 9.9
    assert cache.get("IL") == 3.85
    assert len(cache) == 1

    clock.now = 10.0
    assert cache.get("IL") is None
    assert len(cache) == 0


def test_ttl_cache_last_write_wins():
    cache = TTLCache(ttl_seconds=60)
    cache.set("CA", 4.75)
    cache.set("CA", 4.80)
    assert cache.get("CA") == 4.80
    assert "CA" in cache
    cache.clear()
    assert "CA" not in cache


def test_ttl_cache_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        TTLCache(ttl_seconds=0)


@pytest.mark.parametrize(
    "address, expected",
    [
        ("Chicago, IL", ("Chicago", "IL")),
        ("Chicago IL 60601", ("Chicago", "IL")),
        ("Dallas Texas", ("Dallas", "TX")),
        ("123 Main St, Los Angeles, California, USA", ("Los Angeles", "CA")),
        ("TX", (None, "TX")),
    ],
)
def test_split_city_state(address, expected):
    assert _split_city_state(address) == expected


def test_offline_geocode_major_city():
    result = offline_geocode("Chicago, IL")
    assert (result.lat, result.lng) == CHICAGO
    assert result.state == "IL"
    assert result.precision == "city"


def test_offline_geocode_unique_city_without_state():
    result = offline_geocode("Los Angeles")
    assert result.state == "CA"
    assert result.formatted == "Los Angeles, CA"


def test_offline_geocode_unknown_city_falls_back_to_state_center():
    result = offline_geocode("Smallville, KS")
    assert result.state == "KS"
    assert result.precision == "state"


def test_offline_geocode_unresolvable_raises():
    with pytest.raises(GeocodeError):
        offline_geocode("Nowhere Special")
