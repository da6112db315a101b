import math

import numpy as np
import pandas as pd
import pytest

from geoweight.config.settings import CancellationSettings, Settings
from geoweight.core.cancel import CancellationToken
from geoweight.core.errors import InterpolationCancelled, InvalidMetricName, InvalidTransformName, MissingColumn
from geoweight.core.geo import dist_haversine
from geoweight.weighting.aggregate import dist_min, dist_weighted_mean, popdist_weighted_mean


def _origins() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": ["a", "b", "c"],
            "lon": [0.0, 10.0, -5.0],
            "lat": [0.0, 10.0, 3.0],
        }
    )


def _stations() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "lon": [0.0, 0.0],
            "lat": [1.0, 2.0],
            "pm25": [10.0, 20.0],
            "pop": [1.0, 4.0],
        }
    )


def test_dist_weighted_mean_inverse_square_weights():
    out = dist_weighted_mean(_origins().iloc[:1], _stations(), "pm25")
    # Station 2 is twice as far, so it gets a quarter of the weight: (10 + 20/4) / 1.25.
    assert list(out.columns) == ["id", "wmeasure"]
    assert out["wmeasure"].iloc[0] == pytest.approx(12.0)


def test_popdist_weighted_mean_multiplies_by_population():
    out = popdist_weighted_mean(_origins().iloc[:1], _stations(), "pm25")
    # Population 4 at twice the distance exactly cancels the 1/4 distance weight.
    assert list(out.columns) == ["id", "wmeasure"]
    assert out["wmeasure"].iloc[0] == pytest.approx(15.0)


def test_single_reference_row_returns_its_measure():
    y = pd.DataFrame({"lon": [3.0], "lat": [4.0], "pm25": [7.5], "pop": [120.0]})
    for fn in (dist_weighted_mean, popdist_weighted_mean):
        out = fn(_origins(), y, "pm25", dist_function="Vincenty")
        assert out["wmeasure"].tolist() == pytest.approx([7.5, 7.5, 7.5])


def test_output_preserves_origin_order_and_ids():
    x = _origins().iloc[::-1].reset_index(drop=True)
    out = dist_weighted_mean(x, _stations(), "pm25")
    assert out["id"].tolist() == ["c", "b", "a"]
    assert len(out) == 3


def test_log_transform_and_decay_are_applied():
    out = dist_weighted_mean(_origins().iloc[:1], _stations(), "pm25", dist_transform="log", decay=1.0)
    d1 = dist_haversine(0.0, 0.0, 0.0, 1.0)
    d2 = dist_haversine(0.0, 0.0, 0.0, 2.0)
    w1, w2 = 1 / math.log(d1), 1 / math.log(d2)
    assert out["wmeasure"].iloc[0] == pytest.approx((w1 * 10 + w2 * 20) / (w1 + w2))


def test_zero_distance_propagates_nan():
    x = pd.DataFrame({"id": ["on-station"], "lon": [0.0], "lat": [1.0]})
    out = dist_weighted_mean(x, _stations(), "pm25")
    assert np.isnan(out["wmeasure"].iloc[0])


def test_zero_weight_sum_propagates_nan():
    y = _stations().assign(pop=[0.0, 0.0])
    out = popdist_weighted_mean(_origins().iloc[:1], y, "pm25")
    assert np.isnan(out["wmeasure"].iloc[0])


def test_custom_column_names():
    x = pd.DataFrame({"site": [101, 102], "x": [0.0, 0.5], "y": [0.0, 0.5]})
    y = pd.DataFrame({"lng": [0.0, 0.0], "la": [1.0, 2.0], "v": [1.0, 2.0], "people": [3.0, 3.0]})
    out = popdist_weighted_mean(
        x, y, "v", x_id="site", x_lon_col="x", x_lat_col="y", y_lon_col="lng", y_lat_col="la", pop_col="people"
    )
    assert out["id"].tolist() == ["101", "102"]


def test_dist_min_returns_nearest_distance():
    out = dist_min(_origins(), _stations())
    assert list(out.columns) == ["id", "mindist"]
    assert out["mindist"].iloc[0] == pytest.approx(dist_haversine(0.0, 0.0, 0.0, 1.0))
    expected_b = min(dist_haversine(10.0, 10.0, 0.0, 1.0), dist_haversine(10.0, 10.0, 0.0, 2.0))
    assert out["mindist"].iloc[1] == pytest.approx(expected_b)


@pytest.mark.parametrize("funname", ["Haversine", "Vincenty"])
def test_dist_min_is_zero_for_exact_match(funname):
    x = pd.DataFrame({"id": ["hit"], "lon": [0.0], "lat": [2.0]})
    out = dist_min(x, _stations(), dist_function=funname)
    assert out["mindist"].iloc[0] == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize("funname", ["Haversine", "Vincenty"])
def test_infinite_origin_coordinate_only_affects_its_row(funname):
    x = pd.DataFrame({"id": ["ok", "bad"], "lon": [0.0, np.inf], "lat": [0.0, 0.0]})
    y = pd.DataFrame({"lon": [0.0], "lat": [1.0], "pm25": [4.0]})

    nearest = dist_min(x, y, dist_function=funname)
    assert nearest["mindist"].iloc[0] > 0
    assert np.isnan(nearest["mindist"].iloc[1])

    means = dist_weighted_mean(x, y, "pm25", dist_function=funname)
    assert means["wmeasure"].iloc[0] == pytest.approx(4.0)
    assert np.isnan(means["wmeasure"].iloc[1])


def test_dist_min_with_empty_reference_is_infinite():
    y = pd.DataFrame({"lon": pd.Series([], dtype=float), "lat": pd.Series([], dtype=float)})
    out = dist_min(_origins(), y)
    assert np.isinf(out["mindist"]).all()


def test_accepts_column_mappings():
    x = {"id": ["p"], "lon": [0.0], "lat": [0.0]}
    y = {"lon": [0.0, 0.0], "lat": [1.0, 2.0], "pm25": [10.0, 20.0]}
    out = dist_weighted_mean(x, y, "pm25")
    assert out["wmeasure"].iloc[0] == pytest.approx(12.0)


def test_invalid_metric_fails_before_any_distance(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "geoweight.weighting.aggregate.one_to_many", lambda *args, **kwargs: calls.append(args)
    )
    with pytest.raises(InvalidMetricName):
        dist_weighted_mean(_origins(), _stations(), "pm25", dist_function="Bogus")
    with pytest.raises(InvalidMetricName):
        dist_min(_origins(), _stations(), dist_function="Bogus")
    assert calls == []


def test_invalid_transform_raises():
    with pytest.raises(InvalidTransformName):
        popdist_weighted_mean(_origins(), _stations(), "pm25", dist_transform="exp")


def test_missing_column_propagates():
    with pytest.raises(MissingColumn) as excinfo:
        popdist_weighted_mean(_origins(), _stations(), "pm25", pop_col="population")
    assert excinfo.value.column == "population"
    with pytest.raises(KeyError):
        dist_min(_origins(), _stations(), x_id="station_id")


def test_pre_cancelled_token_stops_before_first_row():
    token = CancellationToken()
    token.cancel()
    with pytest.raises(InterpolationCancelled) as excinfo:
        dist_weighted_mean(_origins(), _stations(), "pm25", cancel=token)
    assert excinfo.value.rows_done == 0
    assert excinfo.value.rows_total == 3


def test_cancel_hook_is_polled_at_configured_cadence():
    settings = Settings(cancellation=CancellationSettings(check_every_rows={"dist_min": 2}))
    polled = []

    def hook() -> bool:
        polled.append(True)
        return len(polled) == 2

    x = pd.DataFrame({"id": list("abcde"), "lon": [0.0] * 5, "lat": [0.0] * 5})
    with pytest.raises(InterpolationCancelled) as excinfo:
        dist_min(x, _stations(), cancel=hook, settings=settings)
    # Polled at rows 0 and 2; the second poll asks to stop.
    assert excinfo.value.rows_done == 2
    assert len(polled) == 2


def test_uncancelled_token_lets_the_call_finish():
    out = popdist_weighted_mean(_origins(), _stations(), "pm25", cancel=CancellationToken())
    assert len(out) == 3
