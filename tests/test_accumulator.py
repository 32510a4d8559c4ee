"""Tests for hit accumulation and aim-delta capture."""

import pytest

from detection.accumulator import StatsAccumulator

RIGHT   = (1.0, 0.0, 0.0)
UP      = (0.0, 1.0, 0.0)
FORWARD = (0.0, 0.0, 1.0)


@pytest.fixture
def acc(config):
    return StatsAccumulator(config)


def test_first_hit_creates_records(acc):
    stat = acc.record_hit('p1', 'rifle.ak', True, 10.0, RIGHT, display_name='Alice')
    assert (stat.hits, stat.headshots) == (1, 1)
    assert len(stat.aim_deltas) == 0
    assert acc.get('p1').display_name == 'Alice'
    assert acc.get('p1').weapon_stats['rifle.ak'] is stat


def test_display_name_refreshed(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT, display_name='Alice')
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT, display_name='Alice2')
    assert acc.get('p1').display_name == 'Alice2'


def test_angle_between_consecutive_shots(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, UP)
    assert list(stat.aim_deltas) == [pytest.approx(90.0)]


def test_aim_tracked_per_player_not_per_weapon(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'smg.mp5', False, 10.0, FORWARD)
    assert list(stat.aim_deltas) == [pytest.approx(90.0)]
    assert len(acc.get('p1').weapon_stats['rifle.ak'].aim_deltas) == 0


def test_point_blank_skips_sample_but_refreshes_view(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', True, 1.0, UP)
    assert stat.hits == 2
    assert len(stat.aim_deltas) == 0
    assert acc.last_view('p1') == UP

    # next shot is measured from the point-blank view, not the older one
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, FORWARD)
    assert list(stat.aim_deltas) == [pytest.approx(90.0)]


def test_no_movement_is_discarded(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, (1.0, 1e-6, 0.0))
    assert len(stat.aim_deltas) == 0
    assert stat.hits == 3


def test_small_but_real_movement_is_kept(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    # ~0.057 degrees
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, (1.0, 0.001, 0.0))
    assert len(stat.aim_deltas) == 1
    assert stat.aim_deltas[0] == pytest.approx(0.0573, abs=1e-3)


def test_seeded_view_counts_as_prior(acc):
    acc.seed_view('p1', RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, UP)
    assert list(stat.aim_deltas) == [pytest.approx(90.0)]


def test_forget_clears_view(acc):
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    acc.forget('p1')
    assert acc.last_view('p1') is None
    stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, UP)
    assert len(stat.aim_deltas) == 0
    # statistics survive the disconnect
    assert stat.hits == 2


def test_minimum_distance_from_config(make_config):
    acc = StatsAccumulator(make_config(detection__min_distance_for_checks=50.0))
    acc.record_hit('p1', 'rifle.ak', False, 10.0, RIGHT)
    stat = acc.record_hit('p1', 'rifle.ak', False, 49.9, UP)
    assert len(stat.aim_deltas) == 0


def test_window_caps_at_200(acc):
    directions = (RIGHT, UP)
    for i in range(260):
        stat = acc.record_hit('p1', 'rifle.ak', False, 10.0, directions[i % 2])
    assert stat.hits == 260
    assert len(stat.aim_deltas) == 200


def test_point_blank_boundary(acc):
    assert acc.is_point_blank(1.99)
    assert not acc.is_point_blank(2.0)
