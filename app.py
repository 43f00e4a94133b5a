# app.py - Voice loop HTTP service: upload audio, get transcript and spoken reply
import os
import logging
import time
from typing import Dict, Any, Optional
from urllib.parse import urlsplit

from flask import Flask, request, jsonify, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from config.settings import VoiceLoopConfig, SUPPORTED_VOICES
from speech import VoicePipeline, ASRService, TTSService
from speech.providers import OpenAIASR, OpenAITTS, LabelClassifier, create_openai_client
from storage import UploadSink, ArtifactStore
from utils.errors import VoiceLoopError, InvalidAudioError
from utils.logging import setup_logging
from realtime.mqtt_bridge import MqttAudioBridge

logger = logging.getLogger(__name__)


class VoiceLoopService:
    """Wires configuration, speech gateways and storage into one pipeline"""

    def __init__(self, config: VoiceLoopConfig, asr: Optional[ASRService] = None,
                 tts: Optional[TTSService] = None, classifier: Optional[LabelClassifier] = None):
        self.config = config
        self._init_components(asr, tts, classifier)
        logger.info("✅ Voice loop service initialized")

    def _init_components(self, asr, tts, classifier):
        """Build gateways from config unless test doubles are supplied"""
        if asr is None or tts is None:
            client = create_openai_client(self.config)
            asr = asr or OpenAIASR(client, model=self.config.stt_model)
            tts = tts or OpenAITTS(client, model=self.config.tts_model,
                                   default_voice=self.config.tts_voice)
            logger.info("✅ OpenAI speech gateways initialized")

        if classifier is None and self.config.classifier_enabled:
            classifier = LabelClassifier(self.config.label_api_url,
                                         timeout=self.config.label_api_timeout)
            logger.info("✅ Label classifier enabled")

        self.uploads = UploadSink(self.config.upload_dir)
        self.artifacts = ArtifactStore(self.config.audio_dir)
        self.pipeline = VoicePipeline(
            asr=asr,
            tts=tts,
            uploads=self.uploads,
            artifacts=self.artifacts,
            audio_url_prefix=self.config.audio_subdir,
            classifier=classifier,
            wake_words=self.config.wake_words,
        )

    def base_url(self, host_url: str) -> str:
        """Origin used for artifact URLs"""
        if self.config.public_base_url:
            return self.config.public_base_url

        hostname = urlsplit(host_url).hostname or 'localhost'
        if ':' in hostname:
            hostname = f"[{hostname}]"
        return f"http://{hostname}:{self.config.port}"

    def handle_upload(self, file_storage, voice: Optional[str], host_url: str) -> Dict[str, Any]:
        if voice is not None:
            voice = voice.strip().lower() or None
        if voice is not None and voice not in SUPPORTED_VOICES:
            raise InvalidAudioError(f"Unknown voice: {voice}")

        upload = self.uploads.save(file_storage)
        return self.pipeline.process(upload, self.base_url(host_url), voice=voice)

    def health_check(self) -> Dict[str, Any]:
        return {
            'status': 'healthy',
            'stt_model': self.config.stt_model,
            'tts_model': self.config.tts_model,
            'tts_voice': self.config.tts_voice,
            'upload_dir': self.uploads.upload_dir,
            'audio_dir': self.artifacts.root,
            'classifier_enabled': self.pipeline.classifier is not None,
            'timestamp': time.time()
        }


def create_flask_app(config: Optional[VoiceLoopConfig] = None, asr: Optional[ASRService] = None,
                     tts: Optional[TTSService] = None, classifier: Optional[LabelClassifier] = None) -> Flask:
    """Create Flask app serving the audio endpoint and the public directory"""
    config = config or VoiceLoopConfig()
    service = VoiceLoopService(config, asr=asr, tts=tts, classifier=classifier)

    public_dir = os.path.abspath(config.public_dir)
    service.artifacts.ensure_directory()

    app = Flask(__name__, static_folder=public_dir, static_url_path='')
    app.config['MAX_CONTENT_LENGTH'] = config.max_content_length
    app.extensions['voiceloop'] = service

    # Permissive CORS: all origins, all methods
    CORS(app, send_wildcard=True)

    @app.route('/', methods=['GET'])
    def index():
        if os.path.isfile(os.path.join(public_dir, 'index.html')):
            return send_from_directory(public_dir, 'index.html')
        return "✅ Voice loop server is running!", 200

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify(service.health_check()), 200

    @app.route('/api/audio', methods=['POST'])
    def process_audio():
        """Transcribe the uploaded clip, synthesize a reply, return both"""
        try:
            file_storage = request.files.get('audio')
            voice = request.form.get('voice')
            result = service.handle_upload(file_storage, voice, request.host_url)
            return jsonify(result), 200

        except RequestEntityTooLarge:
            limit = config.max_upload_mb
            logger.warning(f"⚠️ Upload rejected: larger than {limit} MB")
            return jsonify({'success': False, 'error': f'Audio upload exceeds {limit} MB'}), 413
        except VoiceLoopError as e:
            logger.error(f"❌ Audio pipeline error ({e.status_code}): {e.message}")
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            logger.exception(f"❌ Unexpected audio pipeline error: {e}")
            return jsonify({'success': False, 'error': str(e) or e.__class__.__name__}), 500

    return app


def create_app():
    """Create app for WSGI (gunicorn 'app:create_app()')"""
    config = VoiceLoopConfig()
    setup_logging(config.log_level, config.log_file)
    return create_flask_app(config)


def main():
    try:
        config = VoiceLoopConfig()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"❌ {e}")
        raise SystemExit(1)

    setup_logging(config.log_level, config.log_file)
    config.print_safe_debug_info()

    logger.info("🚀 Starting voice loop server...")
    flask_app = create_flask_app(config)

    bridge = None
    if config.mqtt_enabled:
        bridge = MqttAudioBridge(config, flask_app.extensions['voiceloop'].pipeline)
        bridge.start()

    logger.info(f"🌐 HTTP server running on port {config.port}")
    logger.info(f"🔗 Audio endpoint: http://localhost:{config.port}/api/audio")

    try:
        flask_app.run(
            host=config.host,
            port=config.port,
            debug=False,
            threaded=True  # One thread per request
        )
    finally:
        if bridge is not None:
            bridge.stop()


if __name__ == '__main__':
    main()
