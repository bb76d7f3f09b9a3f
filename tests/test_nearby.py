from geoverify.domain.models import NearbyCandidate
from geoverify.query.nearby import find_nearby


def _candidate(id_: str, lon: float, lat: float) -> NearbyCandidate:
    return NearbyCandidate(coordinates=(lon, lat), data={"id": id_, "name": f"Place {id_}"})


def test_find_nearby_filters_and_sorts_by_distance():
    candidates = [
        _candidate("far", 0.01, 0),  # ~1.1 km
        _candidate("mid", 0.002, 0),  # ~222 m
        _candidate("here", 0, 0),
        _candidate("way_off", 1, 1),
    ]

    out = find_nearby(0, 0, candidates, 500)

    assert [m.data["id"] for m in out] == ["here", "mid"]
    assert out[0].distance == 0
    assert out[1].distance == out[1].to_dict()["distance"]
    assert all(m.distance <= 500 for m in out)


def test_find_nearby_keeps_input_order_for_ties():
    candidates = [
        _candidate("b", 0.001, 0),
        _candidate("a", 0.001, 0),
        _candidate("c", 0, 0),
        _candidate("d", -0.001, 0),
    ]

    out = find_nearby(0, 0, candidates, 1000)

    assert [m.data["id"] for m in out] == ["c", "b", "a", "d"]


def test_find_nearby_accepts_mappings_and_flattens_data():
    out = find_nearby(25.0478, 121.5170, [{"coordinates": [121.5170, 25.0478], "data": {"id": "station"}}], 10)

    assert len(out) == 1
    assert out[0].to_dict() == {"id": "station", "distance": 0.0}


def test_find_nearby_empty_input():
    assert find_nearby(0, 0, [], 1000) == []
