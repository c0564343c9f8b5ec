import random
import typing as t


class RandomSource(t.Protocol):
    """Anything that yields uniform draws in [0, 1). `random.Random` qualifies."""

    def random(self) -> float: ...


class FixedSequenceRandomSource:
    """Replays a fixed sequence of draws, cycling when it runs out."""

    def __init__(self, values: t.Sequence[float]):
        if len(values) == 0:
            raise ValueError("at least one value is required")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"draw {v} is outside [0, 1)")
        self.values = list(values)
        self.index = 0

    def random(self) -> float:
        value = self.values[self.index % len(self.values)]
        self.index += 1
        return value


def make_random_source(seed: int | None = None) -> RandomSource:
    """A new, independent random source. Never the module-level `random` state."""
    return random.Random(seed)
