"""
Bullet comment overlay scheduling

Lays a video's newest-first comment list out as timed, lane-assigned overlay
events. Everything here is a pure function of its arguments; callers pass a
comment snapshot and, for `schedule_at`, the current playback position.
"""

import enum
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from byteshorts.schemas.video import Comment, OverlayEvent


class CollisionPolicy(str, enum.Enum):
    """How comments are spread over lanes"""
    STRIPE = "stripe"                # lane = index mod lane count
    EARLIEST_FREE = "earliest_free"  # lane that frees up first, never overlapping


@dataclass(frozen=True)
class OverlayConfig:
    lane_count: int = 5
    base_duration: float = 6.0
    jitter_range: float = 4.0
    per_entry_stagger: float = 1.5
    policy: CollisionPolicy = CollisionPolicy.STRIPE

    @classmethod
    def from_settings(cls, settings) -> "OverlayConfig":
        return cls(
            lane_count=settings.OVERLAY_LANE_COUNT,
            base_duration=settings.OVERLAY_BASE_DURATION,
            jitter_range=settings.OVERLAY_JITTER_RANGE,
            per_entry_stagger=settings.OVERLAY_STAGGER,
            policy=CollisionPolicy(settings.OVERLAY_COLLISION_POLICY),
        )

    @property
    def period(self) -> float:
        return window_period(self.lane_count, self.base_duration, self.jitter_range, self.per_entry_stagger)


def _check_params(lane_count, base_duration, jitter_range, per_entry_stagger, offset=0):
    if lane_count < 1:
        raise ValueError(f"lane_count must be at least 1, got {lane_count}")
    if base_duration <= 0:
        raise ValueError(f"base_duration must be positive, got {base_duration}")
    if jitter_range < 0:
        raise ValueError(f"jitter_range must not be negative, got {jitter_range}")
    if per_entry_stagger < 0:
        raise ValueError(f"per_entry_stagger must not be negative, got {per_entry_stagger}")
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")


def window_period(lane_count: int, base_duration: float, jitter_range: float, per_entry_stagger: float) -> float:
    """Longest time a full window of entries needs to cross the screen"""
    _check_params(lane_count, base_duration, jitter_range, per_entry_stagger)
    return (lane_count - 1) * per_entry_stagger + base_duration + jitter_range


def layout(
    comments: Sequence[Comment],
    lane_count: int,
    base_duration: float,
    jitter_range: float,
    per_entry_stagger: float,
    *,
    offset: int = 0,
    max_events: Optional[int] = None,
    policy: CollisionPolicy = CollisionPolicy.STRIPE,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> List[OverlayEvent]:
    """
    Assign lanes and timing to one window of comments

    Args:
        comments: Newest-first comment snapshot
        lane_count: Number of display lanes
        base_duration: Minimum travel time in seconds
        jitter_range: Random extra travel time, drawn from [0, jitter_range]
        per_entry_stagger: Start delay added per position in the window
        offset: Index of the first comment of the window
        max_events: Window size, defaults to lane_count
        policy: Lane assignment policy
        seed: Seed for the duration jitter; ignored when rng is given
        rng: Random source for the duration jitter

    Returns:
        One OverlayEvent per comment in the window, in comment order
    """
    _check_params(lane_count, base_duration, jitter_range, per_entry_stagger, offset)
    size = lane_count if max_events is None else max_events
    if size < 0:
        raise ValueError(f"max_events must not be negative, got {size}")

    window = list(comments[offset:offset + size])
    if not window:
        return []

    rng = rng or random.Random(seed)
    lane_free_at = [0.0] * lane_count
    events = []

    for position, comment in enumerate(window):
        duration = base_duration + rng.uniform(0, jitter_range)
        start_delay = position * per_entry_stagger

        if policy == CollisionPolicy.EARLIEST_FREE:
            lane = min(range(lane_count), key=lambda candidate: lane_free_at[candidate])
            start_delay = max(start_delay, lane_free_at[lane])
            lane_free_at[lane] = start_delay + duration
        else:
            lane = (offset + position) % lane_count

        events.append(OverlayEvent(
            comment_id=comment.id,
            lane=lane,
            start_delay=start_delay,
            duration=duration,
            text=comment.text,
        ))

    return events


def window_offset(comment_count: int, playback_position: float, config: OverlayConfig) -> int:
    """Index of the first comment shown at a playback position, wrapping around"""
    if not math.isfinite(playback_position) or playback_position < 0:
        raise ValueError(f"playback_position must be a finite, non-negative number, got {playback_position}")
    if comment_count <= 0:
        return 0
    window_count = math.ceil(comment_count / config.lane_count)
    window_index = int(playback_position // config.period) % window_count
    return window_index * config.lane_count


def schedule_at(
    comments: Sequence[Comment],
    playback_position: float,
    config: OverlayConfig,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None
) -> List[OverlayEvent]:
    """Lay out the window of comments active at a playback position"""
    offset = window_offset(len(comments), playback_position, config)
    return layout(
        comments,
        config.lane_count,
        config.base_duration,
        config.jitter_range,
        config.per_entry_stagger,
        offset=offset,
        policy=config.policy,
        seed=seed,
        rng=rng,
    )
