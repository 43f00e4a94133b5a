import os
import logging
from typing import Dict, List, Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Voices accepted by the OpenAI speech endpoint
SUPPORTED_VOICES = (
    'alloy', 'ash', 'ballad', 'coral', 'echo', 'fable',
    'nova', 'onyx', 'sage', 'shimmer', 'verse',
)

DEFAULT_WAKE_WORDS = 'xin chao,hello,hi,nghe,doremon,lily,pipi,bibi'
DEFAULT_MQTT_REPLY = 'Dạ, em đây ạ! Em sẵn sàng nghe lệnh.'


class VoiceLoopConfig:
    """Centralized configuration for the voice loop service"""

    def __init__(self, env: Optional[Dict[str, str]] = None):
        """Initialize configuration from environment variables with validation"""
        self._env = os.environ if env is None else env

        # Core credentials
        self.openai_api_key = self._get('OPENAI_API_KEY')

        # Server configuration
        self.port = self._get_int('PORT', 3000)
        self.host = self._get('HOST', '0.0.0.0')
        self.debug_mode = self._get('ENVIRONMENT', 'development') == 'development'

        # Filesystem layout
        self.upload_dir = self._get('UPLOAD_DIR', 'uploads')
        self.public_dir = self._get('PUBLIC_DIR', 'public')
        self.audio_subdir = self._get('AUDIO_SUBDIR', 'audio')
        self.max_upload_mb = self._get_int('MAX_UPLOAD_MB', 25)

        # Speech configuration
        self.stt_model = self._get('STT_MODEL', 'gpt-4o-mini-transcribe')
        self.tts_model = self._get('TTS_MODEL', 'gpt-4o-mini-tts')
        self.tts_voice = self._get('TTS_VOICE', 'alloy').lower()
        self.openai_timeout = self._get_float('OPENAI_TIMEOUT', 60.0)

        # URL building
        public_base_url = self._get('PUBLIC_BASE_URL')
        self.public_base_url = public_base_url.rstrip('/') if public_base_url else None

        # Optional label classifier
        self.label_api_url = self._get('LABEL_API_URL')
        self.label_api_timeout = self._get_float('LABEL_API_TIMEOUT', 10.0)
        self.wake_words = self._parse_list(self._get('WAKE_WORDS', DEFAULT_WAKE_WORDS))

        # Optional MQTT audio bridge
        self.mqtt_host = self._get('MQTT_HOST')
        self.mqtt_port = self._get_int('MQTT_PORT', 8883)
        self.mqtt_username = self._get('MQTT_USERNAME')
        self.mqtt_password = self._get('MQTT_PASSWORD')
        self.mqtt_tls = self._get('MQTT_TLS', 'true').lower() == 'true'
        self.mqtt_client_id = self._get('MQTT_CLIENT_ID', '')
        self.mqtt_audio_topic = self._get('MQTT_AUDIO_TOPIC', 'robot/audio_in')
        self.mqtt_log_topic = self._get('MQTT_LOG_TOPIC', 'robot/log')
        self.mqtt_reply_topic = self._get('MQTT_REPLY_TOPIC', 'robot/music')
        self.mqtt_reply_text = self._get('MQTT_REPLY_TEXT', DEFAULT_MQTT_REPLY)
        self.mqtt_reply_voice = self._get('MQTT_REPLY_VOICE', 'nova').lower()

        # Logging
        self.log_level = self._get('LOG_LEVEL', 'INFO').upper()
        self.log_file = self._get('LOG_FILE')

        errors = self.validate_config()
        if errors:
            raise ValueError("Configuration validation failed: " + "; ".join(errors))

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._env.get(key)
        if value is None or value.strip() == '':
            return default
        return value.strip()

    def _get_int(self, key: str, default: int) -> int:
        raw = self._get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {raw!r}")

    def _get_float(self, key: str, default: float) -> float:
        raw = self._get(key)
        if raw is None:
            return default
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"{key} must be a number, got {raw!r}")

    @staticmethod
    def _parse_list(raw: str) -> List[str]:
        return [item.strip().lower() for item in raw.split(',') if item.strip()]

    @property
    def audio_dir(self) -> str:
        """Directory holding synthesized artifacts"""
        return os.path.join(self.public_dir, self.audio_subdir)

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def classifier_enabled(self) -> bool:
        return bool(self.label_api_url)

    @property
    def mqtt_enabled(self) -> bool:
        return bool(self.mqtt_host)

    def external_base_url(self) -> str:
        """Origin for artifact URLs when no request host is available"""
        return self.public_base_url or f"http://localhost:{self.port}"

    def validate_config(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)"""
        errors = []

        if not self.openai_api_key:
            errors.append("OPENAI_API_KEY is required")

        if self.port < 1 or self.port > 65535:
            errors.append(f"Invalid port number: {self.port}")

        if self.max_upload_mb <= 0:
            errors.append("MAX_UPLOAD_MB must be positive")

        if self.openai_timeout <= 0:
            errors.append("OPENAI_TIMEOUT must be positive")

        if self.label_api_timeout <= 0:
            errors.append("LABEL_API_TIMEOUT must be positive")

        if self.tts_voice not in SUPPORTED_VOICES:
            errors.append(f"Unknown TTS_VOICE: {self.tts_voice}")

        if self.mqtt_enabled:
            if self.mqtt_port < 1 or self.mqtt_port > 65535:
                errors.append(f"Invalid MQTT port number: {self.mqtt_port}")
            if self.mqtt_reply_voice not in SUPPORTED_VOICES:
                errors.append(f"Unknown MQTT_REPLY_VOICE: {self.mqtt_reply_voice}")
            if self.mqtt_password and not self.mqtt_username:
                errors.append("MQTT_PASSWORD requires MQTT_USERNAME")

        for error in errors:
            logger.error(f"❌ Configuration error: {error}")

        return errors

    def get_config_dict(self) -> Dict:
        """Return configuration as dictionary"""
        return {
            'openai_api_key': self.openai_api_key,
            'port': self.port,
            'host': self.host,
            'debug_mode': self.debug_mode,
            'upload_dir': self.upload_dir,
            'public_dir': self.public_dir,
            'audio_dir': self.audio_dir,
            'max_upload_mb': self.max_upload_mb,
            'stt_model': self.stt_model,
            'tts_model': self.tts_model,
            'tts_voice': self.tts_voice,
            'openai_timeout': self.openai_timeout,
            'public_base_url': self.public_base_url,
            'label_api_url': self.label_api_url,
            'label_api_timeout': self.label_api_timeout,
            'wake_words': list(self.wake_words),
            'log_level': self.log_level,
            'mqtt_host': self.mqtt_host,
            'mqtt_port': self.mqtt_port,
            'mqtt_username': self.mqtt_username,
            'mqtt_password': self.mqtt_password,
            'mqtt_tls': self.mqtt_tls,
            'mqtt_audio_topic': self.mqtt_audio_topic,
            'mqtt_log_topic': self.mqtt_log_topic,
            'mqtt_reply_topic': self.mqtt_reply_topic,
            'log_file': self.log_file,
        }

    def get_safe_config(self) -> Dict:
        """Get configuration with sensitive data hidden"""
        safe_config = self.get_config_dict().copy()
        if safe_config['openai_api_key']:
            safe_config['openai_api_key'] = safe_config['openai_api_key'][:7] + "..."
        if safe_config['mqtt_password']:
            safe_config['mqtt_password'] = "***"
        return safe_config

    def print_safe_debug_info(self):
        """Log the effective configuration without exposing credentials"""
        logger.info("=" * 50)
        logger.info("🔧 VOICE LOOP CONFIGURATION")
        logger.info("=" * 50)
        logger.info(f"OPENAI_API_KEY: {'✅ Loaded' if self.openai_api_key else '❌ Missing'}")
        logger.info(f"ENVIRONMENT: {'development' if self.debug_mode else 'production'}")
        logger.info(f"PORT: {self.port}")
        logger.info(f"STT_MODEL: {self.stt_model}")
        logger.info(f"TTS_MODEL: {self.tts_model} (voice: {self.tts_voice})")
        logger.info(f"UPLOAD_DIR: {self.upload_dir}")
        logger.info(f"AUDIO_DIR: {self.audio_dir}")
        logger.info(f"PUBLIC_BASE_URL: {self.public_base_url or 'ℹ️ Not set (using request host)'}")
        logger.info(f"LABEL_API_URL: {'✅ Enabled' if self.classifier_enabled else 'ℹ️ Disabled'}")
        logger.info(f"MQTT_HOST: {self.mqtt_host + ':' + str(self.mqtt_port) if self.mqtt_enabled else 'ℹ️ Disabled'}")
        logger.info("=" * 50)
