import json
from typing import Any, Dict, Optional

from .exceptions import ModelOutputError
from .logging import hash_preview, jlog

PARSE_FAILED = "Failed to parse model JSON."

def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None

def extract_braced(text: str) -> Optional[str]:
    """Substring from the first "{" to the last "}" inclusive, or None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start:end + 1]

def parse_model_reply(content: Optional[str]) -> Dict[str, Any]:
    """
    Two-stage parse of the model's reply.

    1. Strict json.loads of the whole (stripped) reply.
    2. Brace scan: json.loads of the text between the first "{" and the last
       "}", which tolerates prose or code fences around the object.

    A reply that yields no JSON object from either stage raises
    ModelOutputError; nothing further is attempted.
    """
    text = (content or "").strip()

    data = _loads_object(text)
    if data is not None:
        return data

    candidate = extract_braced(text)
    if candidate is not None:
        data = _loads_object(candidate)
        if data is not None:
            jlog(event="audit_parse_fallback", reply=hash_preview(text), extracted_len=len(candidate))
            return data

    raise ModelOutputError(PARSE_FAILED)
