# ============================================================================
# src/lab_ingestion/extractors/vlm_client.py
# ============================================================================
"""
Vision Language Model (VLM) Client

Sends every page of a report to Gemini in a single generateContent request
and returns the model's raw text reply. One request per document lets the
model use whole-document context and avoids N round-trips.

The reply is expected to embed one JSON object:
    {"date": "...", "rows": [{"name", "result", "unit", "reference"}, ...]}
Parsing lives in vision_parser.py.
"""

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..config import vision_settings
from ..utils.exceptions import VisionServiceError

logger = logging.getLogger(__name__)


class GeminiVisionClient:
    """
    Gemini multimodal client for lab table transcription.

    Disabled (is_available == False) when no API key is configured.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else vision_settings.GEMINI_API_KEY
        self.model = model or vision_settings.GEMINI_MODEL
        self.base_url = (base_url or vision_settings.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout or vision_settings.VISION_TIMEOUT
        self.temperature = (
            vision_settings.VISION_TEMPERATURE if temperature is None else temperature
        )

        if not self.is_available:
            logger.warning("Gemini API key not configured, vision extraction disabled")

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def extract_table_data(self, images: List[bytes]) -> str:
        """
        Transcribe the result tables of all pages.

        Args:
            images: Preprocessed PNG pages in document order

        Returns:
            Model reply text ("" when the reply carries no candidate text)

        Raises:
            VisionServiceError: no key, non-200 reply, transport error or timeout
        """
        if not self.is_available:
            raise VisionServiceError("Gemini API key is not configured")
        if not images:
            return ""

        payload = self._build_payload(images)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        logger.info(f"Sending {len(images)} page(s) to {self.model} in a single request")

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload
                ) as response:
                    if response.status != 200:
                        error = await response.text()
                        logger.error(f"Gemini API error {response.status}: {error[:500]}")
                        raise VisionServiceError(
                            f"Gemini API returned {response.status}: {error[:200]}",
                            status=response.status
                        )
                    data = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise VisionServiceError(f"request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise VisionServiceError(f"request failed: {e}") from e

        text = self._candidate_text(data)
        logger.info(f"Gemini returned {len(text)} chars for {len(images)} page(s)")
        return text

    def _build_payload(self, images: List[bytes]) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": self._build_prompt(len(images))}]
        for image in images:
            parts.append({
                "inline_data": {
                    "mime_type": "image/png",
                    "data": base64.b64encode(image).decode("ascii"),
                }
            })
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {"temperature": self.temperature},
        }

    @staticmethod
    def _candidate_text(data: Dict[str, Any]) -> str:
        """Text of the first part of the first candidate, if any."""
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            return ""
        if not parts:
            return ""
        text = parts[0].get("text") if isinstance(parts[0], dict) else None
        return text or ""

    @staticmethod
    def _build_prompt(page_count: int) -> str:
        return f"""You are analyzing {page_count} pages of a blood test results document.
Extract ALL data from the blood test results tables on ALL {page_count} pages.
Return the result ONLY in JSON format (no markdown, no explanations):
{{
  "date": "date the samples were taken, DD.MM.YYYY, or empty",
  "rows": [
    {{
      "name": "full test name",
      "result": "value from Result column (number or 'Выполняется')",
      "unit": "unit of measurement",
      "reference": "reference values"
    }}
  ]
}}

CRITICAL REQUIREMENTS:
- Analyze ALL {page_count} pages/images provided
- Extract ALL rows from ALL tables on ALL pages
- Include rows where result = 'Выполняется' (In Progress) or empty
- For rows with 'Выполняется' keep result as 'Выполняется' (as string)
- For numeric values extract ONLY from the 'Result' column (second column)
- DO NOT extract values from 'Reference Values' or 'Normal Values' columns
- Test name must be complete (e.g. 'Тестостерон общий' not just 'Тестостерон')
- Numbers in decimal format with dot or comma (e.g. 24.67 or 24,67)
- Look for: Glucose, HbA1c, Urea, Vitamin D, IGF-1, hormones, enzymes, lipids, proteins
- Scan EVERY page systematically, do not miss any table rows
- Return ONLY valid JSON, no markdown blocks, no comments"""
