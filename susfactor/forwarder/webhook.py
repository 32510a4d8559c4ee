"""
Discord webhook delivery for detections.
Runs on its own thread so event handling never waits on the network.
"""

import json
import time
import queue
import logging
import threading
import urllib.request
import urllib.error
from datetime import datetime, timezone

log = logging.getLogger('susfactor.webhook')

# ── Settings ──────────────────────────────────────────────────────────────────
RETRY_ATTEMPTS = 3
RETRY_DELAY    = 5
EMBED_COLOR    = 15158332
FATAL_CODES    = (401, 403, 404)


def build_payload(detection):
    ts = datetime.fromtimestamp(detection.timestamp, tz=timezone.utc)
    embed = {
        'title':       'SusFactor Alert',
        'description': f"Player **{detection.display_name}** has been flagged for suspicious activity.",
        'color':       EMBED_COLOR,
        'fields': [
            {'name': 'SteamID',         'value': str(detection.player_id),    'inline': True},
            {'name': 'Suspicion Level', 'value': f"{detection.suspicion:.1f}", 'inline': True},
            {'name': 'Reason',          'value': detection.reason or '—',       'inline': False},
        ],
        'footer': {'text': f"SusFactor | {ts.strftime('%a, %d %b %Y %H:%M:%S GMT')}"},
    }
    return {'embeds': [embed]}


def post_webhook(url, payload, attempts=RETRY_ATTEMPTS, delay=RETRY_DELAY, sleep=time.sleep):
    data = json.dumps(payload).encode()

    for attempt in range(1, attempts + 1):
        try:
            req = urllib.request.Request(
                url, data=data,
                headers={'Content-Type': 'application/json', 'User-Agent': 'SusFactor'},
                method='POST'
            )
            with urllib.request.urlopen(req, timeout=15) as r:
                return 200 <= r.status < 300

        except urllib.error.HTTPError as e:
            log.error(f'HTTP {e.code} attempt {attempt}: {e.reason}')
            if e.code in FATAL_CODES:
                log.critical('Webhook rejected — check actions.webhook_url')
                return False
        except Exception as e:
            log.warning(f'Attempt {attempt} failed: {e}')

        if attempt < attempts:
            sleep(delay * attempt)

    return False


class WebhookForwarder:
    def __init__(self, url, queue_size=100):
        self.url       = url
        self.sent      = 0
        self.failed    = 0
        self._queue    = queue.Queue(maxsize=queue_size)
        self._running  = False
        self._thread   = None

    def start(self):
        if not self.url or self._running:
            return
        self._running = True
        self._thread  = threading.Thread(target=self._run, daemon=True, name='webhook')
        self._thread.start()

    def stop(self):
        if not self._running:
            return
        self._running = False
        self._queue.put(None)
        self._thread.join(timeout=5)

    def enqueue(self, detection):
        if not self.url:
            return False
        try:
            self._queue.put_nowait(detection)
            return True
        except queue.Full:
            self.failed += 1
            log.warning(f'Webhook queue full — dropped alert for {detection.player_id}')
            return False

    def send(self, detection):
        ok = post_webhook(self.url, build_payload(detection))
        if ok:
            self.sent += 1
        else:
            self.failed += 1
        return ok

    def _run(self):
        # Drains everything queued ahead of the stop sentinel
        while True:
            try:
                detection = self._queue.get(timeout=1)
            except queue.Empty:
                if not self._running:
                    break
                continue
            if detection is None:
                break
            try:
                self.send(detection)
            except Exception as e:
                log.error(f'Webhook error: {e}', exc_info=True)
