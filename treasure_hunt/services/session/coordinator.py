import logging
import random
import threading
from typing import Callable, Dict, Optional

from treasure_hunt.catalog import Catalog, FALLBACK_TREASURE_TYPE
from treasure_hunt.models import Phase, Player, clean_player_name
from .spawning import spawn_treasure


MAX_ROUNDS_RANGE = (1, 20)
ROUND_LENGTH_SEC_RANGE = (5, 60)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


def _ms(seconds: Optional[float]) -> Optional[int]:
    return None if seconds is None else int(round(seconds * 1000))


class SessionCoordinator:
    """Authoritative game session: roster, rounds, treasure and timers.

    Every public method takes the session lock, so intents and timer
    callbacks run one at a time against the same state. Methods return
    ``True`` when they changed state and ``False`` when the intent was
    ignored (wrong phase, stale treasure, unknown player, bad value).

    Timers carry the state version they were scheduled for (treasure id for
    round expiry, game id and round for the inter-round advance) and do
    nothing if that version is gone by the time they fire.
    """

    def __init__(
        self,
        scheduler,
        broadcast: Optional[Callable[[dict], None]] = None,
        catalog: Optional[Catalog] = None,
        *,
        max_rounds: int = 10,
        round_length_sec: int = 30,
        treasure_type: str = FALLBACK_TREASURE_TYPE,
        map_id: Optional[str] = None,
        inter_round_delay_ms: int = 1500,
        timeout_slack_ms: int = 100,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._lock = threading.RLock()
        self._scheduler = scheduler
        self._broadcast = broadcast or (lambda snapshot: None)
        self._rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)
        self.catalog = catalog or Catalog()
        self.inter_round_delay = max(0, inter_round_delay_ms) / 1000.0
        self.timeout_slack = max(0, timeout_slack_ms) / 1000.0

        self.players: Dict[str, Player] = {}
        self.phase = Phase.LOBBY
        self.round = 0
        self.max_rounds = _clamp(max_rounds, *MAX_ROUNDS_RANGE)
        self.round_length_ms = _clamp(round_length_sec, *ROUND_LENGTH_SEC_RANGE) * 1000
        self.treasure = None
        self.winner_id: Optional[str] = None
        self.round_ends_at: Optional[float] = None
        self.selected_map_id = (
            map_id if self.catalog.has_map(map_id) else self.catalog.random_map_id(self._rng)
        )
        self.treasure_type = (
            treasure_type if self.catalog.has_treasure_type(treasure_type) else FALLBACK_TREASURE_TYPE
        )

        # Bumped whenever a game starts or is abandoned
        self._game_id = 0
        self._expiry_timer = None
        self._advance_timer = None

    @property
    def scheduler(self):
        return self._scheduler

    # ---- Roster ----

    def connect(self, player_id: str) -> bool:
        with self._lock:
            if player_id not in self.players:
                self.players[player_id] = Player(player_id)
                self.logger.info(f"[player-connect] player={player_id} players={len(self.players)}")
            self._publish()
            return True

    def join(self, player_id: str, name, score_hint: Optional[int] = None) -> bool:
        with self._lock:
            player = self.players.get(player_id)
            if player is None:
                player = self.players[player_id] = Player(player_id)
            player.name = clean_player_name(name)
            # A returning player may restore their own score, once per connection
            if not player.has_joined and score_hint is not None and score_hint >= 0:
                player.score = min(int(score_hint), self.max_rounds)
            player.has_joined = True
            self.logger.info(f"[player-join] player={player_id} name={player.name!r} score={player.score}")
            self._publish()
            return True

    def disconnect(self, player_id: str) -> bool:
        with self._lock:
            if self.players.pop(player_id, None) is None:
                return False
            self.logger.info(f"[player-disconnect] player={player_id} players={len(self.players)}")
            if not self.players:
                self._return_to_lobby('empty-roster')
            self._publish()
            return True

    # ---- Game flow ----

    def start(self) -> bool:
        with self._lock:
            if self.phase not in Phase.CONFIGURABLE:
                return self._ignore('start', f"phase={self.phase}")
            if not self.players:
                return self._ignore('start', 'no players')
            self._cancel_timers()
            self._game_id += 1
            for player in self.players.values():
                player.score = 0
            self.round = 1
            self.logger.info(f"[game-start] game={self._game_id} players={len(self.players)} max_rounds={self.max_rounds}")
            self._spawn_round()
            return True

    def reset(self) -> bool:
        with self._lock:
            self._return_to_lobby('reset')
            self._publish()
            return True

    def tap_treasure(self, player_id: str, treasure_id: Optional[str]) -> bool:
        with self._lock:
            if self.phase != Phase.PLAYING or self.treasure is None:
                return self._ignore('tap', f"player={player_id} phase={self.phase}")
            if treasure_id != self.treasure.id:
                return self._ignore('tap', f"player={player_id} stale treasure={treasure_id}")
            if self.winner_id is not None:
                return self._ignore('tap', f"player={player_id} already won by {self.winner_id}")
            player = self.players.get(player_id)
            if player is None:
                return self._ignore('tap', f"unknown player={player_id}")

            self.winner_id = player_id
            player.score += 1
            self.logger.info(
                f"[tap-claim] round={self.round} treasure={treasure_id} winner={player_id} score={player.score}"
            )
            self._finish_round()
            return True

    # ---- Settings (lobby / ended only) ----

    def select_map(self, map_id: Optional[str]) -> bool:
        with self._lock:
            resolved = self.catalog.resolve_map_id(map_id)
            if resolved is None:
                return self._reject_setting('selectMap', f"unknown map={map_id!r}")
            if self.phase not in Phase.CONFIGURABLE:
                return self._reject_setting('selectMap', f"phase={self.phase}")
            self.selected_map_id = resolved
            self._publish()
            return True

    def set_max_rounds(self, value: Optional[int]) -> bool:
        with self._lock:
            if value is None:
                return self._reject_setting('setMaxRounds', 'not a number')
            if self.phase not in Phase.CONFIGURABLE:
                return self._reject_setting('setMaxRounds', f"phase={self.phase}")
            self.max_rounds = _clamp(value, *MAX_ROUNDS_RANGE)
            self._publish()
            return True

    def set_round_length(self, seconds: Optional[int]) -> bool:
        with self._lock:
            if seconds is None:
                return self._reject_setting('setRoundLength', 'not a number')
            if self.phase not in Phase.CONFIGURABLE:
                return self._reject_setting('setRoundLength', f"phase={self.phase}")
            self.round_length_ms = _clamp(seconds, *ROUND_LENGTH_SEC_RANGE) * 1000
            self._publish()
            return True

    def set_treasure_type(self, key: Optional[str]) -> bool:
        with self._lock:
            if not self.catalog.has_treasure_type(key):
                return self._reject_setting('setTreasureType', f"unknown key={key!r}")
            if self.phase not in Phase.CONFIGURABLE:
                return self._reject_setting('setTreasureType', f"phase={self.phase}")
            self.treasure_type = key
            self._publish()
            return True

    # ---- Snapshot ----

    def snapshot(self) -> dict:
        with self._lock:
            return {
                'phase': self.phase,
                'round': self.round,
                'maxRounds': self.max_rounds,
                'players': [p.to_dict() for p in self.players.values()],
                'treasure': self.treasure.to_dict() if self.treasure else None,
                'winnerId': self.winner_id,
                'roundEndsAt': _ms(self.round_ends_at),
                'roundLengthMs': self.round_length_ms,
                'selectedMapId': self.selected_map_id,
                'treasureType': self.treasure_type,
                'availableMaps': [dict(m) for m in self.catalog.maps],
                'serverNow': _ms(self._scheduler.time()),
            }

    # ---- Internals (lock held) ----

    def _spawn_round(self) -> None:
        now = self._scheduler.time()
        treasure = spawn_treasure(self._rng, self.catalog.icon_for(self.treasure_type), now)
        self.treasure = treasure
        self.winner_id = None
        self.phase = Phase.PLAYING
        self.round_ends_at = now + self.round_length_ms / 1000.0
        self.logger.info(
            f"[round-spawn] game={self._game_id} round={self.round}/{self.max_rounds} "
            f"treasure={treasure.id} length_ms={self.round_length_ms}"
        )
        self._expiry_timer = self._scheduler.call_later(
            self.round_length_ms / 1000.0 + self.timeout_slack,
            self._on_round_expired,
            treasure.id,
            label=f"expiry treasure={treasure.id}",
        )
        self._publish()

    def _on_round_expired(self, treasure_id: str) -> None:
        with self._lock:
            live = self.treasure.id if self.treasure else None
            if self.phase != Phase.PLAYING or live != treasure_id:
                self.logger.info(f"[timer-abort] expiry treasure={treasure_id} live={live} phase={self.phase}")
                return
            self.logger.info(f"[timer-fire] expiry round={self.round} treasure={treasure_id} unclaimed")
            self._finish_round()

    def _finish_round(self) -> None:
        self.phase = Phase.ROUND_OVER
        self.treasure = None
        self.round_ends_at = None
        if self._expiry_timer is not None:
            self._expiry_timer.cancel()
            self._expiry_timer = None
        self._publish()
        self._advance_timer = self._scheduler.call_later(
            self.inter_round_delay,
            self._on_advance,
            self._game_id,
            self.round,
            label=f"advance game={self._game_id} round={self.round}",
        )

    def _on_advance(self, game_id: int, round_no: int) -> None:
        with self._lock:
            if self.phase != Phase.ROUND_OVER or game_id != self._game_id or round_no != self.round:
                self.logger.info(
                    f"[timer-abort] advance game={game_id} round={round_no} "
                    f"actual_game={self._game_id} actual_round={self.round} phase={self.phase}"
                )
                return
            self._advance_timer = None
            next_round = self.round + 1
            if next_round > self.max_rounds:
                self.phase = Phase.ENDED
                self.round = self.max_rounds
                self.winner_id = None
                self.logger.info(f"[game-ended] game={self._game_id} rounds={self.round}")
                self._publish()
                return
            if not self.players:
                self._return_to_lobby('no players for next round')
                self._publish()
                return
            self.round = next_round
            self._spawn_round()

    def _return_to_lobby(self, reason: str) -> None:
        self._cancel_timers()
        self._game_id += 1
        for player in self.players.values():
            player.score = 0
        self.phase = Phase.LOBBY
        self.round = 0
        self.treasure = None
        self.winner_id = None
        self.round_ends_at = None
        self.logger.info(f"[lobby] reason={reason} players={len(self.players)}")

    def _cancel_timers(self) -> None:
        for timer in (self._expiry_timer, self._advance_timer):
            if timer is not None:
                timer.cancel()
        self._expiry_timer = None
        self._advance_timer = None

    def _ignore(self, intent: str, detail: str) -> bool:
        self.logger.debug(f"[intent-ignored] {intent} {detail}")
        return False

    def _reject_setting(self, intent: str, detail: str) -> bool:
        # Resync settings UIs that may have changed optimistically
        self._ignore(intent, detail)
        self._publish()
        return False

    def _publish(self) -> None:
        self._broadcast(self.snapshot())
