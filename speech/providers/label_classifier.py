import os
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = 'unknown'


class LabelClassifier:
    """Client for an external audio classification endpoint.

    The endpoint accepts a multipart upload in the `file` field and answers
    with JSON carrying a `label`. Any failure degrades to "unknown".
    Each call opens its own requests.Session, so one classifier can serve
    concurrent request threads.
    """

    def __init__(self, url: str, timeout: float = 10.0, session_factory=requests.Session):
        self.url = url
        self.timeout = timeout
        self.session_factory = session_factory

    def classify(self, audio_path: str) -> str:
        try:
            with self.session_factory() as session, open(audio_path, 'rb') as handle:
                files = {'file': (os.path.basename(audio_path), handle)}
                response = session.post(self.url, files=files, timeout=self.timeout)

            logger.debug(f"📡 POST {self.url} - Status: {response.status_code}")
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.Timeout:
            logger.warning("⚠️ Label classifier timed out")
            return UNKNOWN_LABEL
        except requests.exceptions.RequestException as e:
            logger.warning(f"⚠️ Label classifier unreachable: {e}")
            return UNKNOWN_LABEL
        except ValueError as e:
            logger.warning(f"⚠️ Label classifier returned invalid JSON: {e}")
            return UNKNOWN_LABEL
        except OSError as e:
            logger.warning(f"⚠️ Could not read audio for classification: {e}")
            return UNKNOWN_LABEL

        label = data.get('label') if isinstance(data, dict) else None
        label = label or UNKNOWN_LABEL
        logger.info(f"🔹 Label: {label}")
        return label
