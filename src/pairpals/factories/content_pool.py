"""Resolves the distinct content references used to build a board."""
from __future__ import annotations

import random
import string
from typing import Callable, List, Sequence

from pairpals.constants import AVATAR_URL_TEMPLATE

_SEED_ALPHABET = string.ascii_lowercase + string.digits
_MAX_GENERATE_ATTEMPTS = 32


def generate_avatar(rng: random.Random | None = None) -> str:
    """Return a fresh seeded avatar URL used as filler content."""
    rng = rng or random.SystemRandom()
    seed = "".join(rng.choice(_SEED_ALPHABET) for _ in range(6))
    return AVATAR_URL_TEMPLATE.format(seed=seed)


def _fresh_ref(pool: List[str], generate: Callable[[], str]) -> str:
    taken = set(pool)
    ref = generate()
    for _ in range(_MAX_GENERATE_ATTEMPTS):
        if ref not in taken:
            return ref
        ref = generate()
    # Generator keeps colliding; disambiguate by position.
    ref = f"{ref}#{len(pool)}"
    while ref in taken:
        ref += "#"
    return ref


def resolve_content_pool(
    supplied: Sequence[str] | None,
    pair_count: int,
    generate: Callable[[], str] = generate_avatar,
) -> List[str]:
    """Return exactly ``pair_count`` distinct content references.

    Supplied references come first, in order and without repeats; any
    remaining slots are filled by calling ``generate``. Extra supplied
    references beyond ``pair_count`` are dropped.
    """
    if pair_count <= 0:
        return []
    pool = list(dict.fromkeys(supplied or []))[:pair_count]
    while len(pool) < pair_count:
        pool.append(_fresh_ref(pool, generate))
    return pool
