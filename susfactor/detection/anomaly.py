"""Anomaly detector — standardized deviation from the weapon baseline"""

import logging
import threading

from detection.stats import population_stddev

logger = logging.getLogger('susfactor.anomaly')

MIN_AIM_SAMPLES = 20


class Anomaly:
    def __init__(self, increase, reasons):
        self.increase = increase
        self.reasons  = reasons

    @property
    def reason(self):
        return ' '.join(self.reasons)

    def __repr__(self):
        return f"Anomaly(increase={self.increase:.3f}, reasons={self.reasons!r})"


class AnomalyDetector:
    def __init__(self, config):
        self.config             = config
        self.anomalies_detected = 0
        self._count_lock        = threading.Lock()

        self.hsr_threshold = config.get('detection.headshot_ratio_threshold', 3.0)
        self.aim_threshold = config.get('detection.smooth_aim_threshold', 2.5)

    def headshot_z(self, stat, baseline):
        if baseline.stddev_hsr <= 0:
            return None
        return (stat.headshot_ratio - baseline.mean_hsr) / baseline.stddev_hsr

    def smooth_aim_z(self, stat, baseline):
        if len(stat.aim_deltas) <= MIN_AIM_SAMPLES or baseline.stddev_aim_delta <= 0:
            return None
        player_std = population_stddev(stat.aim_deltas)
        # Less wobble than the population is what stands out
        return (baseline.mean_aim_delta - player_std) / baseline.stddev_aim_delta

    def evaluate(self, stat, baseline, weapon_id=''):
        """Return an Anomaly when either check exceeds its threshold, else None."""
        increase = 0.0
        reasons  = []

        z = self.headshot_z(stat, baseline)
        if z is not None and z > self.hsr_threshold:
            increase += z
            reasons.append(f"High HSR ({weapon_id})")

        z = self.smooth_aim_z(stat, baseline)
        if z is not None and z > self.aim_threshold:
            increase += z
            reasons.append(f"Smooth Aim ({weapon_id})")

        if increase <= 0:
            return None
        with self._count_lock:
            self.anomalies_detected += 1
        logger.debug(f"{weapon_id}: +{increase:.2f} ({', '.join(reasons)})")
        return Anomaly(increase, reasons)
