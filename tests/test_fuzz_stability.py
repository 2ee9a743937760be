import random
import string
from typing import Any

from deltapack.diff import analyze
from deltapack.render import render

FUZZ_SEED = 20261019


def _random_key(rng: random.Random) -> str:
    keys = ["id", "name", "items", "meta", "value", "tags", "report_id"]
    if rng.random() < 0.7:
        return rng.choice(keys)
    return "".join(rng.choice(string.ascii_lowercase) for _ in range(rng.randint(3, 8)))


def _random_scalar(rng: random.Random) -> Any:
    choice = rng.randrange(7)
    if choice == 0:
        return None
    if choice == 1:
        return bool(rng.getrandbits(1))
    if choice == 2:
        return rng.randint(-100, 100)
    if choice == 3:
        return rng.uniform(-10, 10)
    if choice == 4:
        return "<b>&'\""
    return "".join(rng.choice(string.ascii_letters + " ") for _ in range(rng.randint(0, 12)))


def _random_value(rng: random.Random, *, depth: int) -> Any:
    if depth <= 0:
        return _random_scalar(rng)
    choice = rng.randrange(4)
    if choice == 0:
        return {
            _random_key(rng): _random_value(rng, depth=depth - 1)
            for _ in range(rng.randint(0, 4))
        }
    if choice == 1:
        return [_random_value(rng, depth=depth - 1) for _ in range(rng.randint(0, 4))]
    return _random_scalar(rng)


def test_fuzz_symmetry_and_identity() -> None:
    rng = random.Random(FUZZ_SEED)

    for _ in range(300):
        left = _random_value(rng, depth=4)
        right = _random_value(rng, depth=4)

        forward = analyze(left, right)
        backward = analyze(right, left)

        assert forward.changes.added == backward.changes.removed
        assert forward.changes.removed == backward.changes.added
        assert forward.changes.changed == backward.changes.changed
        assert analyze(left, left).is_match is True


def test_fuzz_change_kinds_are_disjoint() -> None:
    rng = random.Random(FUZZ_SEED + 1)

    for _ in range(300):
        result = analyze(_random_value(rng, depth=4), _random_value(rng, depth=4))
        changes = result.changes

        assert changes.changed.isdisjoint(changes.added)
        assert changes.changed.isdisjoint(changes.removed)
        assert changes.added.isdisjoint(changes.removed)


def test_fuzz_render_is_total_and_escaped() -> None:
    rng = random.Random(FUZZ_SEED + 2)

    for _ in range(200):
        left = _random_value(rng, depth=4)
        right = _random_value(rng, depth=4)
        result = analyze(left, right)

        for value, side in ((left, "left"), (right, "right")):
            markup = render(value, result, side)
            assert "<b>" not in markup
            assert markup.count("<span") == markup.count("</span>")
