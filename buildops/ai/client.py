"""
Generative AI client.
Posts prompts to the Gemini generateContent REST endpoint and parses the JSON
payload the model is asked to return.
"""
import json
import logging
import os
from typing import Optional, Dict, Any

import requests
from django.conf import settings

from buildops.core.exceptions import AIServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gemini-1.5-flash'
DEFAULT_API_URL = 'https://generativelanguage.googleapis.com/v1beta'
DEFAULT_TIMEOUT = 30


class GenerativeClient:
    """Thin wrapper around the generateContent endpoint with JSON output requested"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 api_url: Optional[str] = None, timeout: Optional[int] = None):
        self.api_key = api_key or getattr(settings, 'GEMINI_API_KEY', os.getenv('GEMINI_API_KEY', ''))
        self.model = model or getattr(settings, 'GEMINI_MODEL', DEFAULT_MODEL)
        self.api_url = (api_url or getattr(settings, 'GEMINI_API_URL', DEFAULT_API_URL)).rstrip('/')
        self.timeout = timeout or getattr(settings, 'AI_REQUEST_TIMEOUT', DEFAULT_TIMEOUT)

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/models/{self.model}:generateContent"

    def generate_json(self, prompt: str) -> Dict[str, Any]:
        """
        Send ``prompt`` and return the decoded JSON object from the first candidate.

        Raises:
            AIServiceError: missing key, transport failure, non-2xx status,
                or output that is not a JSON object
        """
        if not self.api_key:
            raise AIServiceError('AI service is not configured.')

        body = {
            'contents': [{'role': 'user', 'parts': [{'text': prompt}]}],
            'generationConfig': {'responseMimeType': 'application/json'},
        }

        try:
            response = requests.post(
                self.endpoint,
                params={'key': self.api_key},
                json=body,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.error(f"AI request timed out after {self.timeout}s (model={self.model})")
            raise AIServiceError('AI service timed out.')
        except requests.exceptions.RequestException as e:
            logger.error(f"AI request failed: {str(e)}")
            raise AIServiceError('AI service is unavailable.')

        if response.status_code >= 400:
            logger.error(f"AI service returned {response.status_code}: {response.text[:500]}")
            raise AIServiceError(f'AI service returned an error ({response.status_code}).')

        return self._parse(response)

    def _parse(self, response) -> Dict[str, Any]:
        try:
            payload = response.json()
            text = payload['candidates'][0]['content']['parts'][0]['text']
        except (ValueError, KeyError, IndexError, TypeError):
            logger.error(f"Unexpected AI response shape: {response.text[:500]}")
            raise AIServiceError('AI service returned an unexpected response.')

        text = text.strip()
        # Models sometimes wrap JSON in a markdown fence
        if text.startswith('```'):
            text = text.strip('`')
            if text.lower().startswith('json'):
                text = text[4:]

        try:
            data = json.loads(text)
        except ValueError:
            logger.error(f"AI output is not valid JSON: {text[:500]}")
            raise AIServiceError('AI service returned malformed output.')

        if not isinstance(data, dict):
            raise AIServiceError('AI service returned malformed output.')
        return data


def get_client() -> GenerativeClient:
    return GenerativeClient()
