"""
Detection Engine — orchestrates accumulator, baseline, anomaly, suspicion, alerts
"""

import time
import queue
import logging
import threading

from database.store import StateStore
from detection.alert import AlertManager
from detection.anomaly import AnomalyDetector
from detection.accumulator import StatsAccumulator
from detection.baseline import BaselineManager
from detection.suspicion import SuspicionTracker
from detection import report

logger = logging.getLogger('susfactor.engine')

DECAY_INTERVAL = 60


class DetectionEngine:
    def __init__(self, config, store=None, alert_manager=None, clock=time.time):
        self.config   = config
        self.clock    = clock
        self._running = False
        self._queue   = queue.Queue(maxsize=config.get('performance.queue_size', 1000))
        self._stop    = threading.Event()
        self._start_time = None

        # Stats
        self.events_processed = 0
        self.events_dropped   = 0
        self.evaluations      = 0
        self._stats_lock      = threading.Lock()

        self.min_hits_eval    = config.get('detection.min_hits_for_evaluation', 30)
        self.rebuild_interval = float(config.get('detection.baseline_update_interval_minutes', 60)) * 60

        # Sub-components
        self.store            = store or StateStore(config)
        players, baseline     = self.store.load()
        self.accumulator      = StatsAccumulator(config, players)
        self.baseline_manager = BaselineManager(config, baseline)
        self.anomaly_detector = AnomalyDetector(config)
        self.tracker          = SuspicionTracker(config, clock=clock)
        self.alert_manager    = alert_manager or AlertManager(config)

        self._workers = []
        self._timers  = []

    # ── lifecycle ─────────────────────────────────────────────────────────────

    def start(self):
        self._running    = True
        self._start_time = time.time()
        self._stop.clear()
        self.alert_manager.start()

        for i in range(self.config.get('performance.worker_threads', 2)):
            t = threading.Thread(target=self._worker, daemon=True, name=f'worker-{i}')
            t.start()
            self._workers.append(t)

        for name, interval, fn in (
            ('decay',    DECAY_INTERVAL,        self.decay_tick),
            ('baseline', self.rebuild_interval, self.rebuild_baseline),
        ):
            t = threading.Thread(target=self._every, args=(interval, fn), daemon=True, name=name)
            t.start()
            self._timers.append(t)

        logger.info(
            f"Detection engine started — {len(self.accumulator.players)} players, "
            f"{len(self.baseline_manager.current.weapons)} weapon baselines"
        )

    def stop(self):
        if self._running:
            self._running = False
            self._stop.set()
            for _ in self._workers:
                self._queue.put(None)
            # Workers finish every accepted event before state is saved
            for t in self._workers:
                t.join()
            for t in self._timers:
                t.join(timeout=3)
            self._workers = []
            self._timers  = []
            self.alert_manager.stop()
        self.save()
        logger.info("Detection engine stopped")

    def _every(self, interval, fn):
        while not self._stop.wait(interval):
            try:
                fn()
            except Exception as e:
                logger.error(f"{fn.__name__} failed: {e}", exc_info=True)

    # ── event intake ──────────────────────────────────────────────────────────

    def submit(self, event):
        try:
            self._queue.put_nowait(event)
            return True
        except queue.Full:
            self._count('events_dropped')
            return False

    def _count(self, name):
        with self._stats_lock:
            setattr(self, name, getattr(self, name) + 1)

    def _worker(self):
        # Drains everything queued ahead of the stop sentinel
        while True:
            try:
                event = self._queue.get(timeout=1)
            except queue.Empty:
                if not self._running:
                    break
                continue
            if event is None:
                break
            try:
                self._process(event)
            except Exception as e:
                logger.error(f"Worker error: {e}", exc_info=True)

    def _process(self, event):
        self._count('events_processed')
        kind = event.get('type', 'hit')

        if kind == 'connect':
            self.connect(event['player_id'], event.get('aim'))
        elif kind == 'disconnect':
            self.disconnect(event['player_id'])
        elif kind == 'hit':
            self.handle_hit(
                event['attacker_id'],
                event['weapon'],
                event.get('headshot', False),
                event.get('distance', 0.0),
                event['aim'],
                display_name=event.get('attacker_name'),
            )
        else:
            logger.debug(f"Ignoring event type {kind!r}")

    def connect(self, player_id, aim=None):
        if aim is not None:
            self.accumulator.seed_view(str(player_id), aim)

    def disconnect(self, player_id):
        player_id = str(player_id)
        self.accumulator.forget(player_id)
        self.tracker.forget(player_id)

    def handle_hit(self, player_id, weapon_id, headshot, distance, aim, display_name=None):
        """Record one pre-filtered hit and evaluate it. Returns the Detection if one fired."""
        player_id = str(player_id)
        record    = self.accumulator.get_or_create(player_id, display_name)
        detection = None

        with record.lock:
            stat = self.accumulator.record_hit(player_id, weapon_id, headshot, distance, aim)
            # Point-blank hits count toward the stats but are never judged
            if stat.hits > self.min_hits_eval and not self.accumulator.is_point_blank(distance):
                wb = self.baseline_manager.get(weapon_id)
                if wb is not None:
                    self._count('evaluations')
                    anomaly = self.anomaly_detector.evaluate(stat, wb, weapon_id)
                    if anomaly is not None:
                        detection = self.tracker.add(player_id, record, anomaly.increase, anomaly.reason)

        # Dispatch only after the trigger state is committed and the lock released
        if detection is not None:
            try:
                self.alert_manager.process(detection)
            except Exception as e:
                logger.error(f"Alert dispatch failed for {player_id}: {e}", exc_info=True)
        return detection

    # ── periodic work ─────────────────────────────────────────────────────────

    def decay_tick(self):
        records = [rec for _, rec in self.accumulator.snapshot()]
        return self.tracker.decay(records)

    def rebuild_baseline(self):
        self.save()
        records  = [rec for _, rec in self.accumulator.snapshot()]
        baseline = self.baseline_manager.rebuild(records)
        self.save()
        return baseline

    def save(self):
        return self.store.save(self.accumulator.snapshot(), self.baseline_manager.current)

    # ── queries ───────────────────────────────────────────────────────────────

    @property
    def baseline(self):
        return self.baseline_manager.current

    def player_summary(self, player_id, reveal_full_detail=True, use_color=False, name=None):
        player_id = str(player_id)
        return report.player_summary(
            self.accumulator.get(player_id),
            self.baseline_manager.current,
            self.tracker.threshold,
            reveal_full_detail=reveal_full_detail,
            use_color=use_color,
            name=name or player_id,
        )

    def baseline_summary(self):
        return report.baseline_summary(self.baseline_manager.current)

    def get_stats(self):
        runtime = time.time() - (self._start_time or time.time())
        return {
            'events_processed':   self.events_processed,
            'events_dropped':     self.events_dropped,
            'players_tracked':    len(self.accumulator.players),
            'weapon_baselines':   len(self.baseline_manager.current.weapons),
            'baseline_rebuilds':  self.baseline_manager.rebuilds,
            'evaluations':        self.evaluations,
            'anomalies_detected': self.anomaly_detector.anomalies_detected,
            'detections':         self.tracker.triggered,
            'detections_suppressed': self.tracker.suppressed,
            'alerts_generated':   self.alert_manager.generated,
            'runtime_seconds':    int(runtime),
            'events_per_second':  round(self.events_processed / max(runtime, 1), 2),
            'queue_size':         self._queue.qsize(),
        }
