import random
from collections import Counter

from esper import World

from pairpals.components.board import Board
from pairpals.components.tile import FlipState, HintMark, Tile, TileFlip
from pairpals.factories.board import build_board_layout, fisher_yates_shuffle, spawn_board


def _position_frequencies(shuffle, size: int, trials: int, seed: int) -> list[list[float]]:
    rng = random.Random(seed)
    counts = [[0] * size for _ in range(size)]
    for _ in range(trials):
        items = list(range(size))
        shuffle(items, rng)
        for position, item in enumerate(items):
            counts[item][position] += 1
    return [[count / trials for count in row] for row in counts]


def _max_deviation(frequencies: list[list[float]]) -> float:
    expected = 1.0 / len(frequencies)
    return max(abs(freq - expected) for row in frequencies for freq in row)


def _naive_shuffle(items, rng):
    # Swaps every slot with any slot; a well-known biased permutation.
    n = len(items)
    for i in range(n):
        j = rng.randrange(n)
        items[i], items[j] = items[j], items[i]


def test_board_holds_every_content_exactly_twice():
    content = ["a", "b", "c", "d", "e", "f"]
    layout = build_board_layout(content, random.Random(1))

    assert len(layout) == 2 * len(content)
    counts = Counter(ref for _, ref in layout)
    assert set(counts) == set(content)
    assert all(count == 2 for count in counts.values())


def test_board_ids_follow_final_positions():
    layout = build_board_layout(["x", "y", "z"], random.Random(2))
    assert [tile_id for tile_id, _ in layout] == list(range(6))


def test_board_generation_does_not_mutate_content():
    content = ["a", "b"]
    build_board_layout(content, random.Random(0))
    assert content == ["a", "b"]


def test_spawn_board_creates_hidden_unhinted_tiles():
    world = World()
    entities = spawn_board(world, ["a", "b", "c", "d"], random.Random(5), columns=4)

    assert len(entities) == 8
    boards = [board for _, board in world.get_component(Board)]
    assert boards == [Board(pair_count=4, columns=4)]
    for index, ent in enumerate(entities):
        assert world.component_for_entity(ent, Tile).id == index
        assert world.component_for_entity(ent, TileFlip).state is FlipState.HIDDEN
        assert world.component_for_entity(ent, HintMark).hinted is False


def test_shuffle_positions_are_uniform():
    frequencies = _position_frequencies(fisher_yates_shuffle, size=6, trials=30000, seed=11)
    assert _max_deviation(frequencies) < 0.012


def test_biased_shuffle_fails_uniformity_check():
    frequencies = _position_frequencies(_naive_shuffle, size=3, trials=30000, seed=11)
    assert _max_deviation(frequencies) > 0.015
