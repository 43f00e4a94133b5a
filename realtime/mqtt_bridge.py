"""MQTT audio bridge: clips published by a device come back as spoken replies.

Each payload on the audio topic is stored, transcribed and, when the
transcript carries a wake word, classified and answered with a synthesized
reply whose URL is published on the reply topic. Transcripts without a wake
word are only published on the log topic.
"""

import json
import logging
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt

from speech.pipeline import VoicePipeline, new_request_id
from utils.errors import VoiceLoopError

logger = logging.getLogger(__name__)


class MqttAudioBridge:
    """Subscribes to the audio topic and runs each clip through the pipeline"""

    def __init__(self, config, pipeline: VoicePipeline, client: Optional[mqtt.Client] = None):
        self.config = config
        self.pipeline = pipeline
        self.client = client or self._create_client()
        self.client.on_connect = self.on_connect
        self.client.on_message = self.on_message

    def _create_client(self) -> mqtt.Client:
        client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=self.config.mqtt_client_id)
        if self.config.mqtt_username:
            client.username_pw_set(self.config.mqtt_username, self.config.mqtt_password)
        if self.config.mqtt_tls:
            client.tls_set()
        return client

    def start(self):
        """Connect and process messages on paho's background thread"""
        logger.info(f"🔌 Connecting to MQTT broker {self.config.mqtt_host}:{self.config.mqtt_port}")
        self.client.connect(self.config.mqtt_host, self.config.mqtt_port)
        self.client.loop_start()

    def stop(self):
        self.client.loop_stop()
        self.client.disconnect()

    def on_connect(self, client, userdata, flags, reason_code, properties=None):
        if getattr(reason_code, 'is_failure', False):
            logger.error(f"❌ MQTT connection refused: {reason_code}")
            return
        logger.info("✅ Connected to MQTT broker")
        client.subscribe(self.config.mqtt_audio_topic)

    def on_message(self, client, userdata, message):
        if message.topic != self.config.mqtt_audio_topic:
            return
        try:
            self.handle_audio(message.payload)
        except Exception as e:
            logger.exception(f"❌ Error handling MQTT message: {e}")

    def handle_audio(self, payload: bytes) -> Optional[Dict[str, Any]]:
        """Run one received clip; returns what was published, None on failure"""
        request_id = new_request_id()
        try:
            upload = self.pipeline.uploads.save_bytes(payload, 'recv.wav')
        except VoiceLoopError as e:
            logger.error(f"❌ MQTT audio rejected: {e.message}")
            return None

        try:
            transcript = self.pipeline.transcribe(upload, request_id)

            if not self.pipeline.heard_wake_word(transcript):
                message = {'transcript': transcript.text}
                self._publish(self.config.mqtt_log_topic, message)
                return message

            label = self.pipeline.classify(upload, transcript, request_id)
            reply = self.config.mqtt_reply_text
            audio_url = self.pipeline.speak(reply, self.config.external_base_url(),
                                            voice=self.config.mqtt_reply_voice,
                                            request_id=request_id)

            message = {'audio_url': audio_url, 'text': reply, 'label': label}
            self._publish(self.config.mqtt_reply_topic, message)
            return message

        except VoiceLoopError as e:
            logger.error(f"❌ MQTT audio pipeline error: {e.message}")
            return None
        finally:
            self.pipeline.uploads.discard(upload)

    def _publish(self, topic: str, message: Dict[str, Any]):
        self.client.publish(topic, json.dumps(message, ensure_ascii=False))
        logger.info(f"📢 Published to {topic}")
