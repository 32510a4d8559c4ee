"""
Event feed — reads combat events as JSON lines (file or stdin),
applies the pre-filters and dispatches to the detection engine.

Hit event:
    {"type": "hit", "weapon": "rifle.ak", "headshot": true, "distance": 31.5,
     "attacker": {"id": "7656...", "name": "x", "npc": false, "team": 3, "clan": "ABC",
                  "position": [0, 0, 0], "aim": [0.1, 0.0, 0.99]},
     "victim":   {"id": "7656...", "npc": false, "team": 4, "position": [5, 0, 30]}}

Connect/disconnect:
    {"type": "connect", "player": {"id": "7656...", "aim": [0, 0, 1]}}
    {"type": "disconnect", "player": {"id": "7656..."}}
"""

import sys
import json
import logging
import threading

from utils.helpers import as_vector, distance as vec_distance

logger = logging.getLogger('susfactor.events')


def _player_id(p):
    pid = (p or {}).get('id')
    return str(pid) if pid not in (None, '') else None


def is_friendly(attacker, victim):
    team = attacker.get('team') or 0
    if team != 0 and team == (victim.get('team') or 0):
        return True
    clan = attacker.get('clan')
    return bool(clan) and clan == victim.get('clan')


def parse_event(raw, exclude_friendly_fire=True):
    """Normalize a raw event dict. Returns None for events the engine must not see."""
    kind = raw.get('type', 'hit')

    if kind in ('connect', 'disconnect'):
        pid = _player_id(raw.get('player'))
        if pid is None:
            return None
        event = {'type': kind, 'player_id': pid}
        if kind == 'connect':
            event['aim'] = as_vector(raw['player'].get('aim'))
        return event

    if kind != 'hit':
        return None

    attacker = raw.get('attacker') or {}
    victim   = raw.get('victim') or {}
    a_id     = _player_id(attacker)
    v_id     = _player_id(victim)
    weapon   = raw.get('weapon')
    aim      = as_vector(attacker.get('aim'))

    if a_id is None or v_id is None or not weapon or aim is None:
        return None
    if attacker.get('npc') or victim.get('npc') or a_id == v_id:
        return None
    if exclude_friendly_fire and is_friendly(attacker, victim):
        return None

    dist = raw.get('distance')
    if dist is None:
        a_pos = as_vector(attacker.get('position'))
        v_pos = as_vector(victim.get('position'))
        if a_pos is None or v_pos is None:
            return None
        dist = vec_distance(a_pos, v_pos)

    return {
        'type':          'hit',
        'attacker_id':   a_id,
        'attacker_name': attacker.get('name'),
        'victim_id':     v_id,
        'weapon':        str(weapon),
        'headshot':      bool(raw.get('headshot', False)),
        'distance':      float(dist),
        'aim':           aim,
    }


class EventFeed:
    def __init__(self, config, path=None):
        self.config    = config
        self.path      = path
        self.callbacks = []
        self.parsed    = 0
        self.filtered  = 0
        self.malformed = 0
        self._running  = False
        self._thread   = None

        self.exclude_friendly_fire = config.get('detection.exclude_friendly_fire', True)

    def add_callback(self, fn):
        self.callbacks.append(fn)

    def start(self):
        self._running = True
        self._thread  = threading.Thread(target=self._read_loop, daemon=True, name='event-feed')
        self._thread.start()
        logger.info(f"Reading events from {self.path or 'stdin'}")
        return True

    def stop(self):
        self._running = False
        if self._thread:
            self._thread.join(timeout=3)

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()

    def _read_loop(self):
        try:
            if self.path in (None, '-'):
                self.feed(sys.stdin)
            else:
                with open(self.path) as f:
                    self.feed(f)
        except Exception as e:
            logger.error(f"Event source error: {e}", exc_info=True)
        finally:
            self._running = False
            logger.info(f"Event source exhausted — parsed {self.parsed}, "
                        f"filtered {self.filtered}, malformed {self.malformed}")

    def feed(self, lines):
        for line in lines:
            if self._thread is not None and not self._running:
                break
            self.handle_line(line)

    def handle_line(self, line):
        line = line.strip()
        if not line or line.startswith('#'):
            return None
        try:
            raw   = json.loads(line)
            event = parse_event(raw, self.exclude_friendly_fire)
        except (ValueError, TypeError, AttributeError) as e:
            self.malformed += 1
            logger.debug(f"Malformed event: {e}")
            return None

        if event is None:
            self.filtered += 1
            return None

        self.parsed += 1
        for cb in self.callbacks:
            try:
                cb(event)
            except Exception as e:
                logger.error(f"Callback error: {e}")
        return event
