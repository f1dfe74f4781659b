"""Small builders shared by the layout tests."""

from layoutforge.generation import GenerationConfig, Room

SEEDS = [1, 7, 42, 1234, 292372]


def small_config(**overrides):
    """A config small enough that a full pipeline run stays fast."""
    base = dict(
        number_of_rooms=40,
        min_main_rooms=4,
        max_main_rooms=10,
        horizontal_spread=30,
        vertical_spread=20,
    )
    base.update(overrides)
    return GenerationConfig(**base)


def room(x, y, w, h, kind="candidate"):
    return Room(x, y, w, h, kind)


def main_room(x, y, w, h):
    return Room(x, y, w, h, "main")
