"""State store — saves and loads (players, baseline) as one JSON document"""

import os
import json
import logging
import tempfile
from pathlib import Path

from detection.stats import PlayerRecord
from detection.baseline import ServerBaseline

logger = logging.getLogger('susfactor.store')

FORMAT_VERSION = 2


class StateStore:
    def __init__(self, config):
        self.config = config
        self._path  = Path(config.get('storage.data_path', 'data/susfactor.json'))

    @property
    def path(self):
        return self._path

    def load(self):
        """Return (players, baseline). Any read failure yields an empty state."""
        if not self._path.exists():
            logger.info(f"No saved state at {self._path} — starting cold")
            return {}, ServerBaseline()
        try:
            with open(self._path) as fp:
                data = json.load(fp)
            players = {
                pid: PlayerRecord.from_dict(pd)
                for pid, pd in (data.get('players') or {}).items()
            }
            baseline = ServerBaseline.from_dict(data.get('baseline'))
        except Exception as e:
            logger.warning(f"Could not load state {self._path}: {e} — starting cold")
            return {}, ServerBaseline()
        logger.info(f"Loaded {len(players)} players, {len(baseline.weapons)} weapon baselines")
        return players, baseline

    @staticmethod
    def serialize(players, baseline):
        return {
            'version':  FORMAT_VERSION,
            'players':  {str(pid): rec.to_dict() for pid, rec in players},
            'baseline': baseline.to_dict(),
        }

    def save(self, players, baseline):
        """`players` is an iterable of (player_id, PlayerRecord)."""
        data = self.serialize(players, baseline)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix='.susfactor-', suffix='.tmp')
            with os.fdopen(fd, 'w') as fp:
                json.dump(data, fp)
            os.replace(tmp, self._path)
        except Exception as e:
            logger.error(f"Failed to save state {self._path}: {e}")
            return False
        logger.debug(f"State saved: {len(data['players'])} players")
        return True
