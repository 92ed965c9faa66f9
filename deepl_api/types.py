"""
Type definitions for the DeepL API wrapper.

This module provides literals and TypedDict definitions describing
the JSON payloads exchanged with the DeepL REST API.
"""

from typing import Literal, TypedDict, List, Dict
try:
    from typing import NotRequired
except ImportError:
    # Python < 3.11
    from typing_extensions import NotRequired  # type: ignore


# ==================== Common Literals ====================

LanguageType = Literal["source", "target"]
"""Which side of a translation a language list describes."""

SplitSentencesValue = Literal["0", "1", "nonewlines"]
"""Wire values of the split_sentences option."""

FormalityValue = Literal["default", "more", "less"]
"""Wire values of the formality option."""


# ==================== TypedDict Definitions ====================


class UsageDict(TypedDict):
    """Response of /usage."""
    character_count: int
    character_limit: int


class LanguageDict(TypedDict):
    """One entry of the /languages response."""
    language: str
    name: str
    supports_formality: NotRequired[bool]


class TranslationDict(TypedDict):
    """One entry of the /translate response."""
    detected_source_language: str
    text: str


class TranslationListDict(TypedDict):
    """Response of /translate."""
    translations: List[TranslationDict]


class ServerErrorDict(TypedDict):
    """Error body sent by the server on failures."""
    message: str
    detail: NotRequired[str]


# ==================== Type Aliases ====================

Headers = Dict[str, str]
"""HTTP headers dictionary."""


# ==================== Exports ====================

__all__ = [
    # Literals
    "LanguageType",
    "SplitSentencesValue",
    "FormalityValue",

    # TypedDict
    "UsageDict",
    "LanguageDict",
    "TranslationDict",
    "TranslationListDict",
    "ServerErrorDict",

    # Type Aliases
    "Headers",
]
