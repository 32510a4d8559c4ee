"""Baseline manager — population-wide HSR and aim wobble per weapon"""

import logging
import threading
from collections import defaultdict

from detection.stats import mean, population_stddev

logger = logging.getLogger('susfactor.baseline')

MIN_PLAYERS_PER_WEAPON = 5


class WeaponBaseline:
    def __init__(self, mean_hsr=0.0, stddev_hsr=0.0, mean_aim_delta=0.0, stddev_aim_delta=0.0):
        self.mean_hsr         = mean_hsr
        self.stddev_hsr       = stddev_hsr
        self.mean_aim_delta   = mean_aim_delta
        self.stddev_aim_delta = stddev_aim_delta

    def to_dict(self):
        return {
            'mean_hsr':         self.mean_hsr,
            'stddev_hsr':       self.stddev_hsr,
            'mean_aim_delta':   self.mean_aim_delta,
            'stddev_aim_delta': self.stddev_aim_delta,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(**{k: float(d.get(k, 0.0)) for k in
                      ('mean_hsr', 'stddev_hsr', 'mean_aim_delta', 'stddev_aim_delta')})


class ServerBaseline:
    """Immutable once built; a rebuild produces a new instance."""

    def __init__(self, weapons=None, total_players_sampled=0, total_hits_sampled=0):
        self.weapons               = weapons or {}
        self.total_players_sampled = total_players_sampled
        self.total_hits_sampled    = total_hits_sampled

    def get(self, weapon_id):
        return self.weapons.get(weapon_id)

    def to_dict(self):
        return {
            'weapons':               {w: b.to_dict() for w, b in self.weapons.items()},
            'total_players_sampled': self.total_players_sampled,
            'total_hits_sampled':    self.total_hits_sampled,
        }

    @classmethod
    def from_dict(cls, d):
        d = d or {}
        return cls(
            weapons={w: WeaponBaseline.from_dict(b) for w, b in (d.get('weapons') or {}).items()},
            total_players_sampled=int(d.get('total_players_sampled', 0)),
            total_hits_sampled=int(d.get('total_hits_sampled', 0)),
        )


def rebuild_baseline(records, min_hits):
    """Cold scan of every record. `records` is an iterable of PlayerRecord."""
    hsr_samples = defaultdict(list)
    aim_samples = defaultdict(list)
    players     = 0
    total_hits  = 0

    for record in records:
        with record.lock:
            if not record.weapon_stats:
                continue
            players    += 1
            total_hits += record.total_hits()
            for weapon_id, stat in record.weapon_stats.items():
                if stat.hits < min_hits:
                    continue
                hsr_samples[weapon_id].append(stat.headshot_ratio)
                # Raw deltas are pooled, not per-player summaries
                aim_samples[weapon_id].extend(stat.aim_deltas)

    weapons = {}
    for weapon_id, hsr_list in hsr_samples.items():
        if len(hsr_list) < MIN_PLAYERS_PER_WEAPON:
            continue
        wb = WeaponBaseline(mean(hsr_list), population_stddev(hsr_list))
        deltas = aim_samples[weapon_id]
        if deltas:
            wb.mean_aim_delta   = mean(deltas)
            wb.stddev_aim_delta = population_stddev(deltas)
        weapons[weapon_id] = wb

    return ServerBaseline(weapons, players, total_hits)


class BaselineManager:
    def __init__(self, config, baseline=None):
        self.config   = config
        self.current  = baseline or ServerBaseline()
        self.min_hits = config.get('detection.min_hits_for_baseline', 50)
        self.rebuilds = 0
        # Serializes rebuilders only; readers just take self.current
        self._lock    = threading.Lock()

    def get(self, weapon_id):
        return self.current.get(weapon_id)

    def rebuild(self, records):
        with self._lock:
            baseline = rebuild_baseline(records, self.min_hits)
            self.current = baseline
            self.rebuilds += 1
        logger.info(
            f"Server baseline recalculated. Tracking {len(baseline.weapons)} weapon types "
            f"from {baseline.total_players_sampled} players."
        )
        return baseline
