from typing import List, Tuple

from .config import GenerationConfig
from .rooms import MAIN, Room, is_main_sized


def select_main_rooms(rooms: List[Room], config: GenerationConfig) -> Tuple[List[Room], List[Room]]:
    """Split separated rooms into ``(main_rooms, pool)``.

    Rooms are scanned in list order and the first qualifying rooms win once
    more rooms qualify than ``max_main_rooms`` allows. Qualifiers past the cap
    stay in the pool with everything else.
    """
    main: List[Room] = []
    pool: List[Room] = []
    for room in rooms:
        if len(main) < config.max_main_rooms and is_main_sized(room, config):
            main.append(room.with_kind(MAIN))
        else:
            pool.append(room)
    return main, pool


__all__ = ["select_main_rooms"]
