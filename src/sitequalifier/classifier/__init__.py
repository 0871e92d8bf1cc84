"""ICP classification through a language-model service."""

from .classifier import NO_CONTENT_REASON, Classifier
from .client import OpenRouterClient
from .parser import ParsedClassification, ParseFailure, parse_classification
from .prompts import DEFAULT_SYSTEM_PROMPT, build_user_message

__all__ = [
    "Classifier",
    "DEFAULT_SYSTEM_PROMPT",
    "NO_CONTENT_REASON",
    "OpenRouterClient",
    "ParseFailure",
    "ParsedClassification",
    "build_user_message",
    "parse_classification",
]
