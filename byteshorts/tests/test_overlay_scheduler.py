"""
Tests for bullet comment overlay scheduling
"""

import random
import pytest

from byteshorts.services.overlay_scheduler import (
    CollisionPolicy,
    OverlayConfig,
    layout,
    schedule_at,
    window_offset,
    window_period,
)


class TestLayoutStripe:
    """Round-robin lane striping"""

    def test_empty_comments_give_no_events(self):
        assert layout([], 5, 6.0, 4.0, 1.5) == []

    def test_window_past_the_end_is_empty(self, sample_comments):
        assert layout(sample_comments, 5, 6.0, 4.0, 1.5, offset=20) == []

    def test_lane_is_index_mod_lane_count(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, max_events=len(sample_comments), seed=1)

        assert [event.lane for event in events] == [i % 5 for i in range(len(sample_comments))]
        assert [event.comment_id for event in events] == [c.id for c in sample_comments]

    def test_default_window_is_the_most_recent_lane_count(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, seed=1)

        assert [event.comment_id for event in events] == ["c0", "c1", "c2", "c3", "c4"]

    def test_start_delays_are_staggered(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, seed=1)

        assert [event.start_delay for event in events] == [0.0, 1.5, 3.0, 4.5, 6.0]

    def test_offset_window_keeps_absolute_lanes(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, offset=5, seed=1)

        assert [event.comment_id for event in events] == ["c5", "c6", "c7"]
        assert [event.lane for event in events] == [0, 1, 2]
        assert [event.start_delay for event in events] == [0.0, 1.5, 3.0]

    def test_durations_stay_within_jitter_range(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, max_events=8)

        assert all(6.0 <= event.duration <= 10.0 for event in events)

    def test_seed_makes_layout_reproducible(self, sample_comments):
        first = layout(sample_comments, 5, 6.0, 4.0, 1.5, seed=7)
        second = layout(sample_comments, 5, 6.0, 4.0, 1.5, seed=7)

        assert first == second

    def test_rng_is_used_when_given(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 4.0, 1.5, rng=random.Random(3))
        expected = random.Random(3)

        assert [event.duration for event in events] == [6.0 + expected.uniform(0, 4.0) for _ in range(5)]

    def test_comments_are_not_modified(self, sample_comments):
        snapshot = [c.model_copy() for c in sample_comments]

        layout(sample_comments, 5, 6.0, 4.0, 1.5)

        assert sample_comments == snapshot

    @pytest.mark.parametrize("args", [
        (0, 6.0, 4.0, 1.5),
        (5, 0.0, 4.0, 1.5),
        (5, 6.0, -1.0, 1.5),
        (5, 6.0, 4.0, -0.5),
    ])
    def test_invalid_parameters(self, sample_comments, args):
        with pytest.raises(ValueError):
            layout(sample_comments, *args)


class TestLayoutEarliestFree:
    """Collision-aware lane selection"""

    def test_entries_in_one_lane_never_overlap(self, sample_comments):
        events = layout(
            sample_comments, 2, 6.0, 4.0, 0.5,
            max_events=8, policy=CollisionPolicy.EARLIEST_FREE, seed=11
        )

        for lane in {event.lane for event in events}:
            in_lane = sorted((e for e in events if e.lane == lane), key=lambda e: e.start_delay)
            for earlier, later in zip(in_lane, in_lane[1:]):
                assert later.start_delay >= earlier.start_delay + earlier.duration

    def test_start_delays_are_non_decreasing(self, sample_comments):
        events = layout(
            sample_comments, 3, 6.0, 4.0, 1.5,
            max_events=8, policy=CollisionPolicy.EARLIEST_FREE, seed=5
        )

        delays = [event.start_delay for event in events]
        assert delays == sorted(delays)

    def test_free_lanes_are_filled_in_order(self, sample_comments):
        events = layout(sample_comments, 5, 6.0, 0.0, 1.5, policy=CollisionPolicy.EARLIEST_FREE)

        assert [event.lane for event in events] == [0, 1, 2, 3, 4]
        assert [event.start_delay for event in events] == [0.0, 1.5, 3.0, 4.5, 6.0]


class TestPlaybackWindows:
    """Choosing the window for a playback position"""

    def test_window_period(self):
        assert window_period(5, 6.0, 4.0, 1.5) == pytest.approx(16.0)

    def test_window_offset_advances_and_wraps(self, overlay_config):
        assert window_offset(8, 0.0, overlay_config) == 0
        assert window_offset(8, 15.9, overlay_config) == 0
        assert window_offset(8, 16.0, overlay_config) == 5
        assert window_offset(8, 32.0, overlay_config) == 0

    def test_window_offset_without_comments(self, overlay_config):
        assert window_offset(0, 100.0, overlay_config) == 0

    def test_negative_position_is_rejected(self, overlay_config):
        with pytest.raises(ValueError):
            window_offset(3, -1.0, overlay_config)

    @pytest.mark.parametrize("position", [float("inf"), float("nan")])
    def test_non_finite_position_is_rejected(self, sample_comments, overlay_config, position):
        with pytest.raises(ValueError):
            window_offset(3, position, overlay_config)
        with pytest.raises(ValueError):
            schedule_at(sample_comments, position, overlay_config)

    def test_schedule_at_lays_out_the_active_window(self, sample_comments, overlay_config):
        events = schedule_at(sample_comments, 20.0, overlay_config, seed=2)

        assert [event.comment_id for event in events] == ["c5", "c6", "c7"]

    def test_schedule_at_is_stable_for_a_position(self, sample_comments, overlay_config):
        assert schedule_at(sample_comments, 3.0, overlay_config, seed=9) == \
            schedule_at(sample_comments, 3.0, overlay_config, seed=9)

    def test_config_from_settings(self):
        class FakeSettings:
            OVERLAY_LANE_COUNT = 3
            OVERLAY_BASE_DURATION = 5.0
            OVERLAY_JITTER_RANGE = 1.0
            OVERLAY_STAGGER = 2.0
            OVERLAY_COLLISION_POLICY = "earliest_free"

        config = OverlayConfig.from_settings(FakeSettings)

        assert config.lane_count == 3
        assert config.policy is CollisionPolicy.EARLIEST_FREE
        assert config.period == pytest.approx(10.0)
