"""Demonstration Socket.IO client: connect, greet, print status events."""

import argparse
import logging
import os
from typing import Any, List, Optional

import socketio
from dotenv import load_dotenv
from socketio.exceptions import ConnectionError as SocketConnectionError

from utils.logging import setup_logging

logger = logging.getLogger(__name__)

GREETING = "Hello from Python client 👋"
CONNECT_TIMEOUT_S = 5
RECONNECTION_ATTEMPTS = 5


class SocketDemoClient:
    """Bidirectional event exchange with a remote Socket.IO server"""

    def __init__(self, url: str, greeting: str = GREETING, sio: Optional[socketio.Client] = None):
        self.url = url
        self.greeting = greeting
        self.sio = sio or socketio.Client(reconnection_attempts=RECONNECTION_ATTEMPTS)
        self.status_events: List[Any] = []
        self._register_handlers()

    def _register_handlers(self):
        self.sio.on('connect', self.on_connect)
        self.sio.on('status', self.on_status)
        self.sio.on('disconnect', self.on_disconnect)
        self.sio.on('connect_error', self.on_connect_error)

    def on_connect(self):
        logger.info("✅ Connected to server!")
        logger.info(f"🔗 Socket ID: {self.sio.sid}")
        self.sio.emit('client_message', self.greeting)

    def on_status(self, data):
        logger.info(f"📡 Received 'status' event: {data}")
        self.status_events.append(data)

    def on_disconnect(self, reason=None):
        logger.info(f"❌ Disconnected: {reason}")

    def on_connect_error(self, data=None):
        logger.error(f"⚠️ Connection error: {data}")

    def connect(self):
        """Open the connection over the WebSocket transport only"""
        logger.info(f"🚀 Connecting to {self.url} ...")
        self.sio.connect(self.url, transports=['websocket'], wait_timeout=CONNECT_TIMEOUT_S)

    def run(self):
        self.connect()
        self.sio.wait()

    def close(self):
        self.sio.disconnect()


def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(description="Socket.IO demonstration client")
    parser.add_argument('url', nargs='?', default=os.getenv('SOCKET_SERVER_URL'),
                        help="server URL (defaults to SOCKET_SERVER_URL)")
    parser.add_argument('--log-level', default=os.getenv('LOG_LEVEL', 'INFO'))
    args = parser.parse_args(argv)

    if not args.url:
        parser.error("a server URL or SOCKET_SERVER_URL is required")

    setup_logging(args.log_level)
    client = SocketDemoClient(args.url)
    try:
        client.run()
    except SocketConnectionError as e:
        logger.error(f"⚠️ Connection error: {e}")
        return 1
    except KeyboardInterrupt:
        client.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
