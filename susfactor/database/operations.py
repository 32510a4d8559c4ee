"""Database operations — detection history"""

import logging
from datetime import datetime, timedelta

from database.connection import get_connection, get_db_path

logger = logging.getLogger('susfactor.database')


class DatabaseOperations:

    @staticmethod
    def enabled():
        return get_db_path() is not None

    @staticmethod
    def save_detection(record: dict) -> bool:
        try:
            c = get_connection()
            c.execute('''
                INSERT OR IGNORE INTO detections
                  (detection_id, player_id, display_name, suspicion, reason,
                   action, timestamp, created_at)
                VALUES
                  (:detection_id, :player_id, :display_name, :suspicion, :reason,
                   :action, :timestamp, :created_at)
            ''', record)
            c.commit()
            return True
        except Exception as e:
            logger.error(f"save_detection error: {e}")
            return False

    @staticmethod
    def get_recent_detections(hours=24, limit=200, player_id=None):
        try:
            c     = get_connection()
            since = (datetime.utcnow() - timedelta(hours=hours)).isoformat()
            if player_id is not None:
                rows = c.execute('''
                    SELECT * FROM detections
                    WHERE created_at >= ? AND player_id = ?
                    ORDER BY created_at DESC LIMIT ?
                ''', (since, str(player_id), limit)).fetchall()
            else:
                rows = c.execute('''
                    SELECT * FROM detections
                    WHERE created_at >= ?
                    ORDER BY created_at DESC LIMIT ?
                ''', (since, limit)).fetchall()
            return [dict(r) for r in rows]
        except Exception as e:
            logger.error(f"get_recent_detections error: {e}")
            return []

    @staticmethod
    def get_detection_stats(hours=24):
        try:
            c     = get_connection()
            since = (datetime.utcnow() - timedelta(hours=hours)).isoformat()
            top   = c.execute('''
                SELECT player_id, display_name, COUNT(*) as count, MAX(suspicion) as peak
                FROM detections WHERE created_at >= ?
                GROUP BY player_id ORDER BY count DESC LIMIT 10
            ''', (since,)).fetchall()
            total = c.execute(
                'SELECT COUNT(*) FROM detections WHERE created_at >= ?', (since,)
            ).fetchone()[0]
            return {
                'total':       total,
                'top_players': [dict(r) for r in top],
            }
        except Exception as e:
            logger.error(f"get_detection_stats error: {e}")
            return {}
