import pytest

from config.settings import VoiceLoopConfig


def test_defaults():
    env = {'OPENAI_API_KEY': 'sk-abc'}
    config = VoiceLoopConfig(env=env)

    assert config.port == 3000
    assert config.host == '0.0.0.0'
    assert config.upload_dir == 'uploads'
    assert config.audio_dir.replace('\\', '/') == 'public/audio'
    assert config.stt_model == 'gpt-4o-mini-transcribe'
    assert config.tts_model == 'gpt-4o-mini-tts'
    assert config.tts_voice == 'alloy'
    assert config.public_base_url is None
    assert config.classifier_enabled is False
    assert 'hello' in config.wake_words


def test_missing_api_key_is_rejected():
    with pytest.raises(ValueError, match='OPENAI_API_KEY'):
        VoiceLoopConfig(env={})


@pytest.mark.parametrize('port', ['0', '70000'])
def test_invalid_port_is_rejected(port):
    with pytest.raises(ValueError, match='port'):
        VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-abc', 'PORT': port})


def test_non_numeric_port_is_rejected():
    with pytest.raises(ValueError, match='PORT'):
        VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-abc', 'PORT': 'abc'})


def test_unknown_voice_is_rejected():
    with pytest.raises(ValueError, match='TTS_VOICE'):
        VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-abc', 'TTS_VOICE': 'robot'})


def test_overrides_and_base_url_trailing_slash():
    config = VoiceLoopConfig(env={
        'OPENAI_API_KEY': 'sk-abc',
        'PORT': '8080',
        'TTS_VOICE': 'Nova',
        'PUBLIC_BASE_URL': 'https://voice.example.com/',
        'LABEL_API_URL': 'https://classifier.example.com/predict',
        'WAKE_WORDS': ' Hey , robot ,,',
        'MAX_UPLOAD_MB': '2',
    })

    assert config.port == 8080
    assert config.tts_voice == 'nova'
    assert config.public_base_url == 'https://voice.example.com'
    assert config.classifier_enabled is True
    assert config.wake_words == ['hey', 'robot']
    assert config.max_content_length == 2 * 1024 * 1024


def test_safe_config_masks_key():
    config = VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-secret-value-1234'})

    safe = config.get_safe_config()

    assert safe['openai_api_key'] == 'sk-secr...'
    assert config.get_config_dict()['openai_api_key'] == 'sk-secret-value-1234'


def test_mqtt_disabled_by_default():
    config = VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-abc'})

    assert config.mqtt_enabled is False
    assert config.external_base_url() == 'http://localhost:3000'


def test_mqtt_settings():
    config = VoiceLoopConfig(env={
        'OPENAI_API_KEY': 'sk-abc',
        'MQTT_HOST': 'broker.example.com',
        'MQTT_PORT': '1883',
        'MQTT_TLS': 'false',
        'MQTT_USERNAME': 'robot',
        'MQTT_PASSWORD': 'secret',
    })

    assert config.mqtt_enabled is True
    assert config.mqtt_port == 1883
    assert config.mqtt_tls is False
    assert config.mqtt_audio_topic == 'robot/audio_in'
    assert config.mqtt_reply_voice == 'nova'
    assert config.get_safe_config()['mqtt_password'] == '***'


def test_mqtt_password_without_username_is_rejected():
    with pytest.raises(ValueError, match='MQTT_USERNAME'):
        VoiceLoopConfig(env={'OPENAI_API_KEY': 'sk-abc', 'MQTT_HOST': 'b', 'MQTT_PASSWORD': 'x'})
