"""Static asset catalogs: playable maps and treasure icons."""

import random
from typing import Dict, List, Optional


# key -> (label, icon file slug)
TREASURE_TYPES = {
    'gem': ('Gem', 'gem'),
    'coin': ('Coin', 'coin'),
    'star': ('Star', 'star'),
    'heart': ('Heart', 'heart'),
    'crown': ('Crown', 'crown'),
    'trophy': ('Trophy', 'trophy'),
    'chest': ('Chest', 'chest'),
    'coinBag': ('Coin Bag', 'coin-bag'),
    'potionRed': ('Potion Red', 'potion-red'),
    'potionBlue': ('Potion Blue', 'potion-blue'),
    'potionGreen': ('Potion Green', 'potion-green'),
    'boltBlue': ('Bolt Blue', 'bolt-blue'),
}
FALLBACK_TREASURE_TYPE = 'gem'


class Catalog:
    def __init__(self, base_url: str = '/assets/images', map_count: int = 18):
        base = base_url.rstrip('/')
        self.maps: List[Dict[str, str]] = []
        for n in range(1, max(1, map_count) + 1):
            map_id = f'map-{n:02d}'
            self.maps.append({
                'id': map_id,
                'thumbUrl': f'{base}/thumbs/{map_id}.jpg',
                'fullUrl': f'{base}/{map_id}.jpg',
            })
        self._maps_by_id = {m['id']: m for m in self.maps}
        self._ids_by_url = {m['fullUrl']: m['id'] for m in self.maps}
        self.treasure_types: Dict[str, Dict[str, str]] = {
            key: {'key': key, 'label': label, 'icon': f'{base}/icons/icon-{slug}.svg'}
            for key, (label, slug) in TREASURE_TYPES.items()
        }

    def has_map(self, map_id) -> bool:
        return map_id in self._maps_by_id

    def resolve_map_id(self, value) -> Optional[str]:
        """Accept a map id or one of its full image URLs."""
        if not isinstance(value, str):
            return None
        if value in self._maps_by_id:
            return value
        return self._ids_by_url.get(value)

    def random_map_id(self, rng=None) -> str:
        return (rng or random).choice(self.maps)['id']

    def has_treasure_type(self, key) -> bool:
        return key in self.treasure_types

    def icon_for(self, key) -> str:
        entry = self.treasure_types.get(key) or self.treasure_types[FALLBACK_TREASURE_TYPE]
        return entry['icon']

    def to_dict(self):
        return {
            'maps': [dict(m) for m in self.maps],
            'treasureTypes': [dict(t) for t in self.treasure_types.values()],
        }
