"""
Live traffic feed for the dashboard header.

Contains:
- LatestValueChannel: single-slot hand-off where a newer value replaces an
  unconsumed older one
- TrafficStreamConsumer: daemon thread reading GET /traffic and publishing
  ThroughputSample values into the channel, reconnecting forever
"""

import queue
import threading
from typing import Generic, Optional, TypeVar

from src.clash_client.client import ClashClient
from src.clash_client.exceptions import ClashError
from src.utils.logger import get_logger
from config.settings import settings

from .models import ThroughputSample

logger = get_logger(__name__)

T = TypeVar('T')


class LatestValueChannel(Generic[T]):
    """Single-producer/single-consumer slot with overwrite semantics."""

    def __init__(self):
        self._queue: "queue.Queue[T]" = queue.Queue(maxsize=1)

    def publish(self, value: T) -> None:
        """Store ``value``, discarding any value not yet consumed."""
        while True:
            try:
                self._queue.put_nowait(value)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    pass

    def drain(self) -> Optional[T]:
        """Return the newest pending value without blocking, or None."""
        latest = None
        while True:
            try:
                latest = self._queue.get_nowait()
            except queue.Empty:
                return latest


class TrafficStreamConsumer:
    """Background reader for the daemon's live traffic stream.

    Connection failures and dropped streams are retried after a flat
    interval, forever. Nothing is ever raised to the UI thread; the header
    simply stops updating until the stream comes back.
    """

    def __init__(self, client: ClashClient, channel: LatestValueChannel,
                 retry_interval: float = None, connect_timeout: float = None,
                 read_timeout: float = None):
        self.client = client
        self.channel = channel
        self.retry_interval = retry_interval if retry_interval is not None else settings.get('traffic.retry_interval', 3)
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.get('traffic.connect_timeout', 5)
        self.read_timeout = read_timeout if read_timeout is not None else settings.get('traffic.read_timeout', 30)
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the reader thread; a second call while it runs does nothing."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='traffic-stream', daemon=True)
        self._thread.start()
        logger.info("Traffic stream consumer started")

    def stop(self) -> None:
        """Ask the reader to exit at its next check."""
        self._stop_event.set()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._consume()
                logger.debug("Traffic stream closed by daemon")
            except ClashError as e:
                logger.debug(f"Traffic stream unavailable: {e}")
            except Exception:
                logger.exception("Unexpected error in traffic stream")

            if self._stop_event.wait(self.retry_interval):
                break

    def _consume(self) -> None:
        """Read one stream until it ends, publishing every sample."""
        for payload in self.client.stream_traffic(self.connect_timeout, self.read_timeout):
            self.channel.publish(ThroughputSample.from_dict(payload))
            if self._stop_event.is_set():
                return
