"""Suspicion tracker — decaying per-player score with trigger and cooldown"""

import time
import logging
import threading

logger = logging.getLogger('susfactor.suspicion')

CALM     = 'calm'
ELEVATED = 'elevated'
FLAGGED  = 'flagged'


class Detection:
    """A committed trigger, handed to the alert manager after locks are released."""

    def __init__(self, player_id, display_name, suspicion, reason, timestamp):
        self.player_id    = player_id
        self.display_name = display_name
        self.suspicion    = suspicion
        self.reason       = reason
        self.timestamp    = timestamp

    def __repr__(self):
        return f"Detection({self.player_id!r}, suspicion={self.suspicion:.1f}, reason={self.reason!r})"


class SuspicionTracker:
    def __init__(self, config, clock=time.time):
        self.config    = config
        self.clock     = clock
        self.triggered  = 0
        self.suppressed = 0
        self._cooldowns = {}
        self._lock      = threading.Lock()

        self.threshold  = float(config.get('detection.notification_threshold', 10.0))
        self.decay_rate = float(config.get('detection.suspicion_decay_rate', 0.5))
        self.cooldown   = float(config.get('detection.notification_cooldown_minutes', 10)) * 60

    def band(self, suspicion):
        if suspicion < self.threshold * 0.5:
            return CALM
        if suspicion < self.threshold * 0.9:
            return ELEVATED
        return FLAGGED

    def last_notification(self, player_id):
        with self._lock:
            return self._cooldowns.get(player_id)

    def in_cooldown(self, player_id, now):
        last = self.last_notification(player_id)
        return last is not None and now < last + self.cooldown

    def add(self, player_id, record, increase, reason=''):
        """Apply an anomaly increase. Caller must hold record.lock.

        Returns a Detection when the trigger fired and was committed, None otherwise.
        Inside the cooldown the score is left above threshold so the next
        anomaly retries.
        """
        if increase <= 0:
            return None
        record.suspicion += increase
        if record.suspicion <= self.threshold:
            return None

        now = self.clock()
        if self.in_cooldown(player_id, now):
            with self._lock:
                self.suppressed += 1
            logger.debug(f"{player_id} above threshold ({record.suspicion:.2f}) but in cooldown")
            return None

        detection = Detection(player_id, record.display_name, record.suspicion, reason, now)
        with self._lock:
            self._cooldowns[player_id] = now
            self.triggered += 1
        record.suspicion = self.threshold / 2
        return detection

    def decay(self, records):
        """One decay tick over every record; never below zero."""
        decayed = 0
        for record in records:
            with record.lock:
                if record.suspicion > 0:
                    record.suspicion = max(0.0, record.suspicion - self.decay_rate)
                    decayed += 1
        return decayed

    def forget(self, player_id):
        with self._lock:
            self._cooldowns.pop(player_id, None)
