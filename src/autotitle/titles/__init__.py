"""Title derivation: keyword heuristics, model selection and AI titles."""

from .controller import TitleController, TitleState
from .defaults import AI_MARKER, KEYWORD_MARKER, should_modify_title
from .generator import generate_ai_title
from .models import find_cheapest_from_models, find_cheapest_model
from .text import extract_keywords, generate_fallback_title, infer_intent, sanitize_title

__all__ = [
    "AI_MARKER",
    "KEYWORD_MARKER",
    "TitleController",
    "TitleState",
    "extract_keywords",
    "find_cheapest_from_models",
    "find_cheapest_model",
    "generate_ai_title",
    "generate_fallback_title",
    "infer_intent",
    "sanitize_title",
    "should_modify_title",
]
