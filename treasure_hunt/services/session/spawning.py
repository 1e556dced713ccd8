import uuid

from treasure_hunt.models import Treasure


# Interior of the board where a treasure stays visible and tappable
SAFE_X = (0.12, 0.88)
SAFE_Y = (0.18, 0.82)
SIZE_RANGE = (0.10, 0.14)


def spawn_treasure(rng, icon: str, now: float) -> Treasure:
    """Create a treasure at a uniformly random point inside the safe area."""
    return Treasure(
        id=uuid.uuid4().hex,
        x=rng.uniform(*SAFE_X),
        y=rng.uniform(*SAFE_Y),
        size=rng.uniform(*SIZE_RANGE),
        icon=icon,
        spawned_at=now,
    )
