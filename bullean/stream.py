"""Client for the candle stream service and a helper to wait for shutdown."""

from __future__ import annotations

import dataclasses
import json
import logging
import signal
import threading
from typing import Any, Callable, Iterator

import websocket

from bullean.entities import (
    HISTORY_LIMIT,
    Candle,
    ClientConfig,
    ClientVersion,
    ResponseType,
    StreamResMsg,
)

logger = logging.getLogger(__name__)

CandleHandler = Callable[[list[Candle]], Any]

_POLL_SECONDS = 0.05


class StreamClient:
    """A subscribed connection to the candle stream service."""

    def __init__(self, connection: Any, name: str = "") -> None:
        self.connection = connection
        self.name = name
        self.is_ready = False

    def __enter__(self) -> "StreamClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _messages(self) -> Iterator[StreamResMsg]:
        """Yield decoded messages until the connection fails or closes."""
        while True:
            try:
                raw = self.connection.recv()
            except websocket.WebSocketTimeoutException as exc:
                logger.warning("read: %s", exc)
                continue
            except (websocket.WebSocketException, OSError) as exc:
                logger.warning("read: %s", exc)
                return
            try:
                yield StreamResMsg.from_dict(json.loads(raw))
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("unmarshal: %s", exc)

    def on_ready(self, fn: CandleHandler) -> threading.Thread | None:
        """Collect history until the service reports it is done, then hand it to `fn`.

        `fn` runs in its own thread, which is returned; None is returned when
        the connection ends before the history is complete.
        """
        candles: list[Candle] = []
        for msg in self._messages():
            if msg.type_of == ResponseType.HISTORY:
                candles.extend(msg.candles)
            if msg.is_done:
                self.is_ready = True
                worker = threading.Thread(target=fn, args=(candles,), daemon=True)
                worker.start()
                return worker
        return None

    def on_candle(self, fn: CandleHandler) -> threading.Thread:
        """Call `fn` with every batch of new candles, in a background thread."""

        def run() -> None:
            for msg in self._messages():
                if msg.type_of == ResponseType.NEW_CANDLE:
                    fn(msg.candles)

        worker = threading.Thread(target=run, daemon=True, name=f"stream-{self.name}")
        worker.start()
        return worker

    def close(self) -> None:
        self.connection.close()


def new_client(config: ClientConfig) -> StreamClient | None:
    """Connect to the stream service and send the subscription request.

    Returns None when the service rejects the credentials; other connection
    failures propagate.
    """
    request = config.stream_req_msg
    if request.history_size > HISTORY_LIMIT:
        request = dataclasses.replace(request, history_size=HISTORY_LIMIT)

    version = config.version
    host = version.value if isinstance(version, ClientVersion) else str(version)
    url = f"ws://{host}/ws"
    logger.info("connecting to %s", url)

    headers = [f"secret-key: {config.api_key}", f"secret-token: {config.api_secret}"]
    try:
        connection = websocket.create_connection(url, header=headers)
    except websocket.WebSocketBadStatusException as exc:
        if getattr(exc, "status_code", None) == 401:
            logger.error("Unauthorized: Please check your API key and secret.")
            return None
        raise

    payload = json.dumps(request.to_dict(), separators=(",", ":")).encode("utf-8")
    connection.send_binary(payload)
    return StreamClient(connection, config.name)


def graceful_exit(stop_event: threading.Event) -> signal.Signals | None:
    """Block until SIGINT/SIGTERM arrives or `stop_event` is set.

    Returns the signal received, or None when the event ended the wait.
    Must be called from the main thread.
    """
    received: list[signal.Signals] = []

    def handler(signum: int, frame: object) -> None:
        received.append(signal.Signals(signum))

    watched = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, handler) for sig in watched}
    try:
        while not received and not stop_event.wait(_POLL_SECONDS):
            pass
    finally:
        for sig, old in previous.items():
            if old is not None:
                signal.signal(sig, old)

    if received:
        logger.info("signal received: %s", received[0].name)
        return received[0]
    logger.info("stop requested")
    return None