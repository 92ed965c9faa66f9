"""
DeepL API wrapper for text translation.

This module provides an async interface to the DeepL Pro REST API (v2),
allowing users to translate text, list supported languages and query
account usage.

A valid DeepL developer account with an associated API key is required,
for example via environment variable:

    export DEEPL_API_KEY=YOUR_KEY
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List

from ..types import (
    LanguageType,
    SplitSentencesValue,
    FormalityValue,
    UsageDict,
    LanguageDict,
    TranslationDict,
    TranslationListDict,
)
from ..utils import (
    BaseAPI,
    BaseResponse,
    DeserializationError,
    InvalidInputError,
    FormFields,
    require_field,
)

logger = logging.getLogger(__name__)


# ==================== Translation Options ====================

class SplitSentences(Enum):
    """Translation option that controls the splitting of sentences before the translation."""

    NONE = "0"
    """Don't split sentences."""

    PUNCTUATION = "nonewlines"
    """Split on punctuation only."""

    PUNCTUATION_AND_NEWLINES = "1"
    """Split on punctuation and newlines."""


class Formality(Enum):
    """Translation option that controls the desired translation formality."""

    DEFAULT = "default"
    MORE = "more"
    LESS = "less"


@dataclass
class TranslationOptions:
    """
    Custom flags for the translation request.

    Attributes:
        split_sentences: Whether the engine first splits the input into sentences (server default: on)
        preserve_formatting: Whether the original formatting is respected, even where it would usually be corrected
        formality: Whether the translation leans towards formal or informal language
    """
    split_sentences: Optional[SplitSentences] = None
    preserve_formatting: Optional[bool] = None
    formality: Optional[Formality] = None

    def to_form(self) -> FormFields:
        """Encode the options that are set as request form fields."""
        form: FormFields = []
        if self.split_sentences is not None:
            value: SplitSentencesValue = self.split_sentences.value
            form.append(("split_sentences", value))
        if self.preserve_formatting is not None:
            form.append(("preserve_formatting", "1" if self.preserve_formatting else "0"))
        if self.formality is not None:
            formality: FormalityValue = self.formality.value
            form.append(("formality", formality))
        return form


# ==================== Data Models ====================

@dataclass
class TranslatableTextList:
    """Holds a list of strings to be translated."""
    target_language: str
    texts: List[str] = field(default_factory=list)
    source_language: Optional[str] = None
    """Auto-detected by DeepL if not provided."""

    def to_form(self) -> FormFields:
        """Encode as request form fields; texts keep their order."""
        form: FormFields = [("target_lang", self.target_language)]
        if self.source_language:
            form.append(("source_lang", self.source_language))
        form.extend(("text", text) for text in self.texts)
        return form


@dataclass
class TranslatedText(BaseResponse):
    """Holds one unit of translated text."""
    detected_source_language: str
    """The language provided, or otherwise the one DeepL auto-detected."""
    text: str

    @classmethod
    def from_dict(cls, data: TranslationDict) -> "TranslatedText":
        """Create TranslatedText from API response dictionary."""
        return cls(
            detected_source_language=require_field(data, "detected_source_language", str, "/translate"),
            text=require_field(data, "text", str, "/translate")
        )


@dataclass
class LanguageInformation(BaseResponse):
    """Information about a single language."""
    language: str
    """Language identifier used by DeepL, e.g. "EN-US"."""
    name: str
    """English name of the language, e.g. "English (American)"."""
    supports_formality: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: LanguageDict) -> "LanguageInformation":
        """Create LanguageInformation from API response dictionary."""
        supports_formality = data.get("supports_formality") if isinstance(data, dict) else None
        return cls(
            language=require_field(data, "language", str, "/languages"),
            name=require_field(data, "name", str, "/languages"),
            supports_formality=supports_formality if isinstance(supports_formality, bool) else None
        )


LanguageList = List[LanguageInformation]
"""Information about available languages."""


@dataclass
class UsageInformation(BaseResponse):
    """Information about API usage & limits for this account."""
    character_count: int
    """Characters already translated in the current billing period."""
    character_limit: int
    """Characters that can be translated per billing period."""

    @property
    def characters_remaining(self) -> int:
        return max(self.character_limit - self.character_count, 0)

    @property
    def limit_reached(self) -> bool:
        return self.character_count >= self.character_limit

    @classmethod
    def from_dict(cls, data: UsageDict) -> "UsageInformation":
        """Create UsageInformation from API response dictionary."""
        return cls(
            character_count=require_field(data, "character_count", int, "/usage"),
            character_limit=require_field(data, "character_limit", int, "/usage")
        )


# ==================== API Client ====================

class DeepL(BaseAPI):
    """
    The main API entry point representing a DeepL developer account with an associated API key.

    Create one instance per account / API key. None of the methods return
    error values: failures raise a DeepLError subclass whose ``kind`` tells
    what went wrong (an AuthorizationError means the API key was refused).

    Example:
        async with DeepL(api_key=os.environ["DEEPL_API_KEY"]) as deepl:
            texts = TranslatableTextList(
                source_language="DE",
                target_language="EN-US",
                texts=["ja"],
            )
            translated = await deepl.translate(texts)
            assert translated[0].text == "yes"

            usage = await deepl.usage_information()
            assert usage.character_limit > 0
    """

    PRO_URL = "https://api.deepl.com/v2"
    FREE_URL = "https://api-free.deepl.com/v2"

    # __init__, __aenter__, __aexit__, _get_headers, _make_request inherited from BaseAPI

    async def usage_information(self) -> UsageInformation:
        """
        Retrieve information about API usage & limits.

        This can also be used to verify an API key without consuming translation contingent.

        Returns:
            UsageInformation with character_count and character_limit
        """
        data: UsageDict = await self._make_request("/usage")

        result = UsageInformation.from_dict(data)
        logger.info(f"Usage: {result.character_count}/{result.character_limit} characters")
        return result

    async def source_languages(self) -> LanguageList:
        """Retrieve all currently available source languages."""
        return await self._languages("source")

    async def target_languages(self) -> LanguageList:
        """Retrieve all currently available target languages."""
        return await self._languages("target")

    async def _languages(self, language_type: LanguageType) -> LanguageList:
        data = await self._make_request("/languages", [("type", language_type)])

        if not isinstance(data, list):
            raise DeserializationError(endpoint="/languages", response_text=repr(data)[:200])

        languages = [LanguageInformation.from_dict(item) for item in data]
        logger.info(f"Retrieved {len(languages)} {language_type} languages")
        return languages

    async def translate(
        self,
        text_list: TranslatableTextList,
        options: Optional[TranslationOptions] = None
    ) -> List[TranslatedText]:
        """
        Translate one or more text chunks at once.

        Args:
            text_list: Texts plus source / target language
            options: Optional flags for non-default behaviour

        Returns:
            One TranslatedText per input text, in input order

        Raises:
            InvalidInputError: If no texts or no target language were given
            DeserializationError: If the response does not match the request
        """
        if not text_list.target_language or not text_list.target_language.strip():
            raise InvalidInputError("Target language cannot be empty")
        if not text_list.texts:
            raise InvalidInputError("Text list cannot be empty")

        logger.info(
            f"Translating {len(text_list.texts)} text(s) "
            f"from {text_list.source_language or 'auto'} to {text_list.target_language}"
        )

        form = text_list.to_form()
        if options is not None:
            form.extend(options.to_form())

        data: TranslationListDict = await self._make_request("/translate", form)

        translations = require_field(data, "translations", list, "/translate")
        result = [TranslatedText.from_dict(item) for item in translations]

        if len(result) != len(text_list.texts):
            raise DeserializationError(
                f"Expected {len(text_list.texts)} translations, got {len(result)}",
                endpoint="/translate"
            )

        logger.info(f"Translation complete: {len(result)} text(s)")
        return result
