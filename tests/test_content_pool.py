import itertools
import random

from pairpals.factories.content_pool import generate_avatar, resolve_content_pool


def _counter_generator():
    counter = itertools.count()
    return lambda: f"gen-{next(counter)}"


def test_supplied_content_is_truncated_to_pair_count():
    supplied = ["a", "b", "c", "d", "e"]
    pool = resolve_content_pool(supplied, 3, _counter_generator())
    assert pool == ["a", "b", "c"]
    assert supplied == ["a", "b", "c", "d", "e"]


def test_partial_content_is_filled_with_generated_items():
    pool = resolve_content_pool(["a", "b"], 4, _counter_generator())
    assert pool == ["a", "b", "gen-0", "gen-1"]


def test_no_content_generates_everything():
    pool = resolve_content_pool([], 3, _counter_generator())
    assert pool == ["gen-0", "gen-1", "gen-2"]
    assert resolve_content_pool(None, 2, _counter_generator()) == ["gen-0", "gen-1"]


def test_zero_pairs_yields_empty_pool():
    assert resolve_content_pool(["a"], 0, _counter_generator()) == []


def test_generate_avatar_returns_seeded_url():
    rng = random.Random(3)
    first = generate_avatar(rng)
    second = generate_avatar(rng)
    assert first.startswith("https://api.dicebear.com/9.x/fun-emoji/svg?seed=")
    assert first != second


def test_repeated_supplied_content_is_collapsed():
    pool = resolve_content_pool(["img", "img", "other", "img"], 4, _counter_generator())
    assert pool == ["img", "other", "gen-0", "gen-1"]


def test_colliding_generator_still_yields_distinct_refs():
    pool = resolve_content_pool(["same"], 3, lambda: "same")
    assert len(pool) == 3
    assert len(set(pool)) == 3
    assert pool[0] == "same"
