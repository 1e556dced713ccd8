"""Normalize loose Socket.IO payloads into typed intent records.

Clients have sent several shapes over time (a bare name string vs.
``{name, score}``, a bare map URL vs. ``{mapId}``). All of that tolerance
lives here so the coordinator only ever sees one shape per intent. A field
parsed as ``None`` means the intent should be ignored.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class JoinIntent:
    name: Any
    score_hint: Optional[int] = None


@dataclass(frozen=True)
class TapIntent:
    treasure_id: Optional[str]


@dataclass(frozen=True)
class SelectMapIntent:
    map_id: Optional[str]


@dataclass(frozen=True)
class SetMaxRoundsIntent:
    value: Optional[int]


@dataclass(frozen=True)
class SetRoundLengthIntent:
    value_seconds: Optional[int]


@dataclass(frozen=True)
class SetTreasureTypeIntent:
    key: Optional[str]


def parse_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            return int(float(value.strip()))
    except (TypeError, ValueError, OverflowError):
        return None
    return None


def _field(data, key):
    """Return ``data[key]`` for dict payloads, or the payload itself."""
    if isinstance(data, dict):
        return data.get(key)
    return data


def _text(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def parse_join(data) -> JoinIntent:
    if isinstance(data, dict):
        score = parse_int(data.get('score'))
        if score is not None and score < 0:
            score = None
        return JoinIntent(name=data.get('name'), score_hint=score)
    return JoinIntent(name=data)


def parse_tap(data) -> TapIntent:
    return TapIntent(treasure_id=_text(_field(data, 'treasureId')))


def parse_select_map(data) -> SelectMapIntent:
    return SelectMapIntent(map_id=_text(_field(data, 'mapId')))


def parse_set_max_rounds(data) -> SetMaxRoundsIntent:
    return SetMaxRoundsIntent(value=parse_int(_field(data, 'value')))


def parse_set_round_length(data) -> SetRoundLengthIntent:
    return SetRoundLengthIntent(value_seconds=parse_int(_field(data, 'valueSeconds')))


def parse_set_treasure_type(data) -> SetTreasureTypeIntent:
    return SetTreasureTypeIntent(key=_text(_field(data, 'key')))
