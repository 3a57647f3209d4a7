import datetime as dt

from pooltime.aggregation import HOURS_PER_DAY, aggregate_hours
from pooltime.domain import WeatherSample


def _sample(hour: int, score: float) -> WeatherSample:
    return WeatherSample(
        timestamp=dt.datetime(2025, 7, 1, hour, 0),
        temperature_c=25.0,
        wind_speed_kmh=5.0,
        precipitation_probability_pct=0.0,
        weather_code=0,
        score=score,
    )


def test_empty_input_still_yields_24_zero_buckets():
    buckets = aggregate_hours([], None)
    assert len(buckets) == HOURS_PER_DAY
    assert [b.hour for b in buckets] == list(range(24))
    assert all(b.score == 0 and not b.is_best and not b.has_data for b in buckets)


def test_sparse_samples_fill_gaps_with_zero():
    buckets = aggregate_hours([_sample(3, 12.0), _sample(15, 88.0)], 15)
    assert len(buckets) == 24
    assert buckets[3].score == 12.0 and buckets[3].has_data
    assert buckets[15].score == 88.0 and buckets[15].is_best
    assert sum(1 for b in buckets if b.has_data) == 2
    assert [b.hour for b in buckets if b.is_best] == [15]


def test_best_hour_is_flagged_even_without_data():
    buckets = aggregate_hours([_sample(3, 12.0)], 7)
    assert buckets[7].is_best
    assert buckets[7].score == 0
    assert not buckets[7].has_data


def test_full_day_keeps_order_and_no_duplicates():
    samples = [_sample(h, float(h)) for h in reversed(range(24))]
    buckets = aggregate_hours(samples, 0)
    assert [b.hour for b in buckets] == list(range(24))
    assert [b.score for b in buckets] == [float(h) for h in range(24)]


def test_first_sample_wins_for_duplicate_hours():
    buckets = aggregate_hours([_sample(9, 40.0), _sample(9, 90.0)], None)
    assert buckets[9].score == 40.0
