PLAYER_NAME_MAX = 32
DEFAULT_PLAYER_NAME = 'Player'


class Phase:
    LOBBY = 'lobby'
    PLAYING = 'playing'
    ROUND_OVER = 'roundOver'
    ENDED = 'ended'

    # Phases in which game settings may be changed or a game started
    CONFIGURABLE = (LOBBY, ENDED)


def clean_player_name(name) -> str:
    """Trim and clamp a display name, falling back to the default."""
    if not isinstance(name, str):
        return DEFAULT_PLAYER_NAME
    return name.strip()[:PLAYER_NAME_MAX].strip() or DEFAULT_PLAYER_NAME


class Player:
    def __init__(self, id, name=DEFAULT_PLAYER_NAME, score=0):
        self.id = id
        self.name = clean_player_name(name)
        self.score = score
        # Set once the connection has sent its first join
        self.has_joined = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }


class Treasure:
    """A single spawn. Never mutated; each round gets a fresh instance and id."""

    __slots__ = ('id', 'x', 'y', 'size', 'icon', 'spawned_at')

    def __init__(self, id, x, y, size, icon, spawned_at):
        self.id = id
        self.x = x
        self.y = y
        self.size = size
        self.icon = icon
        self.spawned_at = spawned_at

    def to_dict(self):
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'size': self.size,
            'icon': self.icon,
        }
