import random

import pytest

from localtv.playback.ad_scheduler import AdBreakScheduler
from localtv.playback.rotation_queue import RotationQueue
from localtv.schemas import AdBreakConfig


def make_scheduler(items=10, ads=5, rng=None, **config) -> AdBreakScheduler:
    scheduler = AdBreakScheduler(rng=rng)
    scheduler.load([f"item-{i}" for i in range(items)])
    scheduler.load_ads([f"ad-{i}" for i in range(ads)])
    scheduler.configure(**config)
    return scheduler


def kinds(values) -> list[str]:
    return ["AD" if v.startswith("ad-") else "item" for v in values]


def test_one_ad_after_every_third_item():
    scheduler = make_scheduler(frequency=3, min_per_break=1, max_per_break=1, enabled=True)

    sequence = [scheduler.next() for _ in range(13)]

    assert kinds(sequence) == ["item", "item", "item", "AD"] * 3 + ["item"]
    assert scheduler.normal_items_played == 10


def test_normal_rotation_is_unaffected_by_ads():
    scheduler = make_scheduler(items=4, frequency=2, min_per_break=1, max_per_break=2, enabled=True)

    normal = [v for v in (scheduler.next() for _ in range(12)) if v.startswith("item-")]

    assert sorted(normal[:4]) == [f"item-{i}" for i in range(4)]


def test_consecutive_blocks_share_no_ads():
    scheduler = make_scheduler(
        ads=6, frequency=1, min_per_break=2, max_per_break=2, enabled=True, rng=random.Random(11)
    )

    blocks = []
    for _ in range(40):
        assert scheduler.next().startswith("item-")
        blocks.append({scheduler.next(), scheduler.next()})
        assert not scheduler.in_break

    for previous, current in zip(blocks, blocks[1:]):
        assert len(current) == 2
        assert not previous & current


def test_small_pool_falls_back_to_full_pool():
    scheduler = make_scheduler(ads=3, frequency=1, min_per_break=2, max_per_break=2, enabled=True)

    for _ in range(10):
        scheduler.next()
        block = [scheduler.next(), scheduler.next()]
        assert kinds(block) == ["AD", "AD"]
        assert len(set(block)) == 2


def test_block_size_clamped_to_pool():
    scheduler = make_scheduler(ads=2, frequency=1, min_per_break=3, max_per_break=4, enabled=True)

    sequence = [scheduler.next() for _ in range(4)]

    assert kinds(sequence) == ["item", "AD", "AD", "item"]


def test_block_size_within_bounds():
    scheduler = make_scheduler(
        ads=10, frequency=1, min_per_break=2, max_per_break=4, enabled=True, rng=random.Random(5)
    )

    sizes = set()
    scheduler.next()
    for _ in range(50):
        size = 0
        while True:
            value = scheduler.next()
            if value.startswith("item-"):
                break
            size += 1
        sizes.add(size)

    assert sizes <= {2, 3, 4}
    assert len(sizes) > 1


def test_reconfigure_does_not_touch_pending_block():
    scheduler = make_scheduler(ads=6, frequency=1, min_per_break=3, max_per_break=3, enabled=True)

    assert kinds([scheduler.next(), scheduler.next()]) == ["item", "AD"]
    scheduler.configure(min_per_break=1, max_per_break=1, frequency=5)

    assert kinds([scheduler.next() for _ in range(3)]) == ["AD", "AD", "item"]


def test_disabled_ads_never_play():
    scheduler = make_scheduler(frequency=1, min_per_break=1, max_per_break=1, enabled=False)

    assert kinds(scheduler.next() for _ in range(20)) == ["item"] * 20


def test_no_ads_loaded_means_no_breaks():
    scheduler = make_scheduler(ads=0, frequency=1, enabled=True)

    assert kinds(scheduler.next() for _ in range(5)) == ["item"] * 5


def test_empty_rotation_returns_none():
    scheduler = AdBreakScheduler()
    scheduler.load_ads(["ad-0"])
    scheduler.configure(enabled=True, frequency=1)

    assert scheduler.next() is None
    assert scheduler.normal_items_played == 0


def test_configure_clamps_invalid_values():
    scheduler = AdBreakScheduler()

    config = scheduler.configure(frequency=0, min_per_break=0, max_per_break=-3, enabled=True)

    assert config == AdBreakConfig(enabled=True, frequency=1, min_per_break=1, max_per_break=1)


@pytest.mark.parametrize(
    "values, expected",
    [
        ({"min_per_break": 4, "max_per_break": 2}, (3, 4, 4)),
        ({"frequency": -2}, (1, 1, 2)),
        ({"min_per_break": 3}, (3, 3, 3)),
        ({"max_per_break": 0}, (3, 1, 1)),
    ],
)
def test_ad_break_config_normalizes(values, expected):
    config = AdBreakConfig(**values)

    assert (config.frequency, config.min_per_break, config.max_per_break) == expected


def test_clear_ads_drops_pending_block():
    scheduler = make_scheduler(ads=6, frequency=1, min_per_break=3, max_per_break=3, enabled=True)
    scheduler.next()
    scheduler.next()

    scheduler.clear_ads()

    assert not scheduler.in_break
    assert kinds(scheduler.next() for _ in range(3)) == ["item"] * 3


def test_previous_skips_ads():
    scheduler = make_scheduler(frequency=1, min_per_break=1, max_per_break=1, enabled=True)

    first = scheduler.next()
    assert scheduler.next().startswith("ad-")
    scheduler.next()

    assert scheduler.previous() == first
    assert scheduler.last_was_ad is False


def test_clear_resets_counters():
    scheduler = make_scheduler(frequency=2, min_per_break=1, max_per_break=1, enabled=True)
    for _ in range(5):
        scheduler.next()

    scheduler.clear()

    assert scheduler.normal_items_played == 0
    assert scheduler.next() is None


def test_wraps_given_queue(scripted_random):
    queue = RotationQueue(scripted_random())
    scheduler = AdBreakScheduler(queue=queue, config=AdBreakConfig(enabled=True, frequency=2))
    scheduler.load(["a", "b", "c"])

    scheduler.next()

    assert scheduler.queue is queue
    assert queue.played_count == 1
