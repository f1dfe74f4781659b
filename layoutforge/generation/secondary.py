from typing import List, Optional, Sequence

from .rooms import SECONDARY, Envelope, Room


def reintegrate(
    halls: Sequence[Room],
    pool: Sequence[Room],
    main_rooms: Sequence[Room],
    envelope: Optional[Envelope] = None,
) -> List[Room]:
    """Pool rooms crossed by at least one hall, reclassified as secondary.

    Membership is decided on footprints so that a room already promoted to
    main is never admitted again, whatever its current kind tag says.
    """
    main_footprints = {r.footprint for r in main_rooms}
    admitted = set()
    secondary: List[Room] = []
    for hall in halls:
        for room in pool:
            if room.footprint in admitted or room.footprint in main_footprints:
                continue
            if hall.overlaps(room):
                admitted.add(room.footprint)
                secondary.append(room.with_kind(SECONDARY))
                if envelope is not None:
                    envelope.include(room)
    return secondary


__all__ = ["reintegrate"]
