"""
DeepL translator module for text translation, language listing and usage queries.

This module provides async access to the DeepL REST API.
"""

from .core import (
    # Main API Client
    DeepL,

    # Data Models
    TranslatableTextList,
    TranslatedText,
    TranslationOptions,
    SplitSentences,
    Formality,
    LanguageInformation,
    LanguageList,
    UsageInformation,
)

__all__ = [
    # Main API Client
    "DeepL",

    # Data Models
    "TranslatableTextList",
    "TranslatedText",
    "TranslationOptions",
    "SplitSentences",
    "Formality",
    "LanguageInformation",
    "LanguageList",
    "UsageInformation",
]
