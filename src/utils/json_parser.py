"""
JSON Parser utility for extracting JSON from LLM responses.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_ANY_OBJECT = re.compile(r"(\{.*\})", re.DOTALL)
_ANSWER_TAG = re.compile(r"<answer>\s*(.*?)\s*</answer>", re.DOTALL | re.IGNORECASE)


class JSONParser:
    """Helper class to extract clean JSON objects from LLM responses."""

    @staticmethod
    def _loads_object(text: str) -> Optional[Dict[str, Any]]:
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            return None
        return value if isinstance(value, dict) else None

    @classmethod
    def _search(cls, text: str) -> Optional[Dict[str, Any]]:
        for pattern in (_CODE_BLOCK, _ANY_OBJECT):
            match = pattern.search(text)
            if match:
                parsed = cls._loads_object(match.group(1))
                if parsed is not None:
                    return parsed
        return None

    @classmethod
    def extract_json(cls, text: str | None) -> Optional[Dict[str, Any]]:
        """Extract a JSON object from text.

        Tries, in order: the whole text, an ``<answer>`` block, a fenced code
        block, then the outermost braces.

        Returns:
            The parsed object, or None when no JSON object can be found
        """
        if not text:
            return None

        parsed = cls._loads_object(text.strip())
        if parsed is not None:
            return parsed

        answer_match = _ANSWER_TAG.search(text)
        if answer_match:
            parsed = cls._search(answer_match.group(1))
            if parsed is not None:
                return parsed

        parsed = cls._search(text)
        if parsed is not None:
            return parsed

        logger.warning("JSONParser: Could not extract JSON object from text")
        return None
