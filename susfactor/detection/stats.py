"""Per-player / per-weapon aim statistics"""

import math
import threading
from collections import deque

AIM_WINDOW = 200


def mean(values):
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_stddev(values):
    """Population standard deviation (divisor N). Fewer than 2 values -> 0."""
    values = list(values)
    if len(values) < 2:
        return 0.0
    avg = sum(values) / len(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


class WeaponStat:
    def __init__(self, hits=0, headshots=0, aim_deltas=()):
        self.hits       = hits
        self.headshots  = headshots
        self.aim_deltas = deque(aim_deltas, maxlen=AIM_WINDOW)

    @property
    def headshot_ratio(self):
        return self.headshots / self.hits if self.hits > 0 else 0.0

    def add_hit(self, headshot):
        self.hits += 1
        if headshot:
            self.headshots += 1

    def add_aim_delta(self, delta):
        # deque(maxlen) drops the oldest sample once full
        self.aim_deltas.append(float(delta))

    def to_dict(self):
        return {
            'hits':       self.hits,
            'headshots':  self.headshots,
            'aim_deltas': list(self.aim_deltas),
        }

    @classmethod
    def from_dict(cls, d):
        hits      = int(d.get('hits', 0))
        headshots = min(int(d.get('headshots', 0)), hits)
        return cls(hits, headshots, d.get('aim_deltas', ()))

    def __repr__(self):
        return f"WeaponStat(hits={self.hits}, headshots={self.headshots}, samples={len(self.aim_deltas)})"


class PlayerRecord:
    """Everything tracked for one player. `lock` guards all mutation."""

    def __init__(self, display_name='', suspicion=0.0, weapon_stats=None):
        self.display_name = display_name
        self.suspicion    = suspicion
        self.weapon_stats = weapon_stats or {}
        self.lock         = threading.RLock()

    def weapon(self, weapon_id):
        stat = self.weapon_stats.get(weapon_id)
        if stat is None:
            stat = WeaponStat()
            self.weapon_stats[weapon_id] = stat
        return stat

    def total_hits(self):
        return sum(ws.hits for ws in self.weapon_stats.values())

    def to_dict(self):
        with self.lock:
            return {
                'display_name': self.display_name,
                'suspicion':    self.suspicion,
                'weapon_stats': {w: ws.to_dict() for w, ws in self.weapon_stats.items()},
            }

    @classmethod
    def from_dict(cls, d):
        return cls(
            display_name=d.get('display_name', ''),
            suspicion=max(0.0, float(d.get('suspicion', 0.0))),
            weapon_stats={w: WeaponStat.from_dict(ws) for w, ws in (d.get('weapon_stats') or {}).items()},
        )
