"""
Alert manager — console log, admin broadcast, webhook and ban actions
"""

import uuid
import logging
from datetime import datetime

from database.operations import DatabaseOperations
from forwarder.webhook import WebhookForwarder

logger = logging.getLogger('susfactor.alert')

ACTIONS = ('none', 'notify', 'ban', 'both')


class AlertManager:
    def __init__(self, config, forwarder=None):
        self.config         = config
        self.log_to_console = config.get('actions.log_to_console', True)
        self.notify_admins  = config.get('actions.notify_admins', True)
        self.ban_reason     = config.get('actions.ban_reason', 'Banned by SusFactor for suspicious activity.')
        self.action         = str(config.get('actions.on_detection', 'notify')).lower()
        if self.action not in ACTIONS:
            logger.warning(f"Unknown actions.on_detection '{self.action}' — using 'none'")
            self.action = 'none'

        self.forwarder      = forwarder or WebhookForwarder(config.get('actions.webhook_url', ''))
        self._broadcasts    = []
        self._ban_handlers  = []
        self.generated      = 0
        self.bans           = 0

    def add_callback(self, fn):
        """fn(message, record) — in-game admin broadcast."""
        self._broadcasts.append(fn)

    def add_ban_handler(self, fn):
        """fn(player_id, reason)"""
        self._ban_handlers.append(fn)

    def start(self):
        if self.action in ('notify', 'both'):
            if not self.forwarder.url:
                logger.warning("Webhook action configured but actions.webhook_url is empty")
            self.forwarder.start()

    def stop(self):
        self.forwarder.stop()

    @staticmethod
    def format_message(detection):
        return (
            f"[SusFactor] Player {detection.display_name} ({detection.player_id}) flagged with "
            f"suspicion level {detection.suspicion:.1f}. Reason: {detection.reason}"
        )

    def process(self, detection):
        """Run the configured response. Called after the trigger state is committed."""
        message = self.format_message(detection)
        record  = {
            'detection_id': str(uuid.uuid4()),
            'player_id':    str(detection.player_id),
            'display_name': detection.display_name,
            'suspicion':    round(detection.suspicion, 3),
            'reason':       detection.reason,
            'action':       self.action,
            'timestamp':    detection.timestamp,
            'created_at':   datetime.utcnow().isoformat(),
        }
        self.generated += 1

        if self.log_to_console:
            logger.warning(message)

        if DatabaseOperations.enabled():
            DatabaseOperations.save_detection(record)

        if self.notify_admins:
            for cb in self._broadcasts:
                try:
                    cb(message, record)
                except Exception as e:
                    logger.error(f"Broadcast callback error: {e}")

        if self.action in ('notify', 'both'):
            self.forwarder.enqueue(detection)
        if self.action in ('ban', 'both'):
            self._ban(detection)

        return record

    def _ban(self, detection):
        for fn in self._ban_handlers:
            try:
                fn(detection.player_id, self.ban_reason)
            except Exception as e:
                logger.error(f"Ban handler error: {e}")
                continue
            self.bans += 1
            logger.warning(
                f"Banned player {detection.display_name} ({detection.player_id}). Reason: {self.ban_reason}"
            )
