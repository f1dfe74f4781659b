import math
import random
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .config import SAMPLING_NORMAL, GenerationConfig
from .random_source import NormalIntSampler, UniformIntSampler

CANDIDATE = "candidate"
MAIN = "main"
SECONDARY = "secondary"
HALL = "hall"

Point = Tuple[float, float]


class Room(NamedTuple):
    x: int
    y: int
    w: int
    h: int
    kind: str = CANDIDATE

    @property
    def x_min(self) -> int:
        return self.x

    @property
    def x_max(self) -> int:
        return self.x + self.w

    @property
    def y_min(self) -> int:
        return self.y

    @property
    def y_max(self) -> int:
        return self.y + self.h

    @property
    def center(self) -> Point:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @property
    def footprint(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)

    def overlaps(self, other: "Room") -> bool:
        return (
            other.x_max > self.x_min
            and other.x_min < self.x_max
            and other.y_max > self.y_min
            and other.y_min < self.y_max
        )

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x_min <= px < self.x_max and self.y_min <= py < self.y_max

    def moved(self, dx: int, dy: int) -> "Room":
        return self._replace(x=self.x + dx, y=self.y + dy)

    def with_kind(self, kind: str) -> "Room":
        return self._replace(kind=kind)

    def to_dict(self):
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h, "kind": self.kind}


class Bounds(NamedTuple):
    x_min: int
    y_min: int
    x_max: int
    y_max: int

    @property
    def width(self) -> int:
        return self.x_max - self.x_min

    @property
    def height(self) -> int:
        return self.y_max - self.y_min

    def encloses(self, room: Room) -> bool:
        return (
            self.x_min <= room.x_min
            and self.y_min <= room.y_min
            and room.x_max <= self.x_max
            and room.y_max <= self.y_max
        )

    def to_dict(self):
        return {"x_min": self.x_min, "y_min": self.y_min, "x_max": self.x_max, "y_max": self.y_max}


class Envelope:
    """Running bounding box over every rectangle that ends up in the layout."""

    def __init__(self, rooms: Iterable[Room] = ()):
        self.bounds: Optional[Bounds] = None
        for room in rooms:
            self.include(room)

    def include(self, room: Room) -> None:
        b = self.bounds
        if b is None:
            self.bounds = Bounds(room.x_min, room.y_min, room.x_max, room.y_max)
            return
        self.bounds = Bounds(
            min(b.x_min, room.x_min),
            min(b.y_min, room.y_min),
            max(b.x_max, room.x_max),
            max(b.y_max, room.y_max),
        )

    def include_all(self, rooms: Iterable[Room]) -> None:
        for room in rooms:
            self.include(room)


def random_point_in_ellipse(radius_x: int, radius_y: int, rng: random.Random) -> Tuple[int, int]:
    t = 2 * math.pi * rng.random()
    u = rng.random() + rng.random()
    r = 2 - u if u > 1 else u
    return (math.ceil(radius_x * r * math.cos(t)), math.ceil(radius_y * r * math.sin(t)))


def is_main_sized(room: Room, config: GenerationConfig) -> bool:
    return room.w >= config.min_main_room_width and room.h >= config.min_main_room_height


def _samplers(config: GenerationConfig, width_range, height_range, use_configured_params: bool):
    if config.sampling == SAMPLING_NORMAL:
        if use_configured_params:
            return (
                NormalIntSampler(*width_range, mean=config.width_mean, stddev=config.width_stddev),
                NormalIntSampler(*height_range, mean=config.height_mean, stddev=config.height_stddev),
            )
        return NormalIntSampler(*width_range), NormalIntSampler(*height_range)
    return UniformIntSampler(*width_range), UniformIntSampler(*height_range)


class RoomFactory:
    """Sample candidate rooms scattered inside the configured ellipse.

    ``main_sized`` counts rooms that already meet the main-room thresholds at
    creation; ``populate`` uses it to decide how many forced main-sized rooms
    to add so selection has enough material to work with.
    """

    def __init__(self, config: GenerationConfig, rng: random.Random):
        self.config = config
        self.rng = rng
        self.main_sized = 0
        self.forced_main_rooms = 0
        self._width, self._height = _samplers(
            config,
            (config.min_room_width, config.max_room_width),
            (config.min_room_height, config.max_room_height),
            use_configured_params=True,
        )
        self._main_width = None
        self._main_height = None

    def _place(self, w: int, h: int) -> Room:
        cx, cy = random_point_in_ellipse(self.config.horizontal_spread, self.config.vertical_spread, self.rng)
        return Room(cx - w // 2, cy - h // 2, w, h)

    def sample(self) -> Room:
        w = self._width.sample(self.rng)
        h = self._height.sample(self.rng)
        room = self._place(w, h)
        if is_main_sized(room, self.config):
            self.main_sized += 1
        return room

    def sample_main(self) -> Room:
        if self._main_width is None:
            # widened ranges always satisfy the thresholds; normal mode derives fresh parameters
            self._main_width, self._main_height = _samplers(
                self.config, self.config.main_width_range, self.config.main_height_range, use_configured_params=False
            )
        w = self._main_width.sample(self.rng)
        h = self._main_height.sample(self.rng)
        room = self._place(w, h)
        self.main_sized += 1
        self.forced_main_rooms += 1
        return room

    def populate(self) -> List[Room]:
        rooms = [self.sample() for _ in range(self.config.number_of_rooms)]
        while self.main_sized < self.config.min_main_rooms:
            rooms.append(self.sample_main())
        return rooms


def sample_room(config: GenerationConfig, rng: random.Random) -> Room:
    return RoomFactory(config, rng).sample()


__all__ = [
    "Room",
    "Bounds",
    "Envelope",
    "RoomFactory",
    "random_point_in_ellipse",
    "is_main_sized",
    "sample_room",
    "CANDIDATE",
    "MAIN",
    "SECONDARY",
    "HALL",
]
