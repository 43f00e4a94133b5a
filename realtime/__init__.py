"""Real-time transports: MQTT audio bridge and socket demonstration client."""

from .mqtt_bridge import MqttAudioBridge
from .socket_client import SocketDemoClient

__all__ = ["MqttAudioBridge", "SocketDemoClient"]
