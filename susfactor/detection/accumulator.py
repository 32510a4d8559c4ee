"""Statistics accumulator — folds combat hits into per-weapon player records"""

import logging
import threading

from detection.stats import PlayerRecord
from utils.helpers import angle_between

logger = logging.getLogger('susfactor.accumulator')

# Smaller angle changes mean the view did not move between shots
AIM_EPSILON = 0.01


class StatsAccumulator:
    def __init__(self, config, players=None):
        self.config       = config
        self.players      = players if players is not None else {}
        self._lock        = threading.Lock()
        self._last_view   = {}
        self._view_lock   = threading.Lock()

        self.min_distance = config.get('detection.min_distance_for_checks', 2.0)

    def get(self, player_id):
        return self.players.get(player_id)

    def get_or_create(self, player_id, display_name=None):
        with self._lock:
            record = self.players.get(player_id)
            if record is None:
                record = PlayerRecord(display_name or str(player_id))
                self.players[player_id] = record
                logger.debug(f"Tracking new player {player_id}")
        if display_name:
            record.display_name = display_name
        return record

    def snapshot(self):
        """Stable list of (player_id, record) for sweeps."""
        with self._lock:
            return list(self.players.items())

    def seed_view(self, player_id, direction):
        with self._view_lock:
            self._last_view[player_id] = direction

    def last_view(self, player_id):
        with self._view_lock:
            return self._last_view.get(player_id)

    def forget(self, player_id):
        with self._view_lock:
            self._last_view.pop(player_id, None)

    def is_point_blank(self, distance):
        return distance < self.min_distance

    def record_hit(self, player_id, weapon_id, headshot, distance, aim, display_name=None):
        record = self.get_or_create(player_id, display_name)
        with record.lock:
            stat = record.weapon(weapon_id)
            stat.add_hit(headshot)

            with self._view_lock:
                last = self._last_view.get(player_id)
                self._last_view[player_id] = aim

            # Point-blank hits refresh the view but say nothing about aim
            if self.is_point_blank(distance) or last is None:
                return stat

            delta = angle_between(last, aim)
            if delta > AIM_EPSILON:
                stat.add_aim_delta(delta)
            return stat
