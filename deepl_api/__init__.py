"""
deepl_api - Lightweight async wrapper for the DeepL REST API
"""

__version__ = "0.2.0"

# Shared configuration and errors
from .utils import (
    APIConfig,
    ErrorKind,
    DeepLError,
    AuthorizationError,
    ServerError,
    DeserializationError,
    TransportError,
    InvalidInputError,
    FileError,
)

# Expose the main API at the package root
from .translator import (
    DeepL,
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
    "__version__",

    # Configuration
    "APIConfig",

    # Errors
    "ErrorKind",
    "DeepLError",
    "AuthorizationError",
    "ServerError",
    "DeserializationError",
    "TransportError",
    "InvalidInputError",
    "FileError",

    # DeepL
    "DeepL",
    "TranslatableTextList",
    "TranslatedText",
    "TranslationOptions",
    "SplitSentences",
    "Formality",
    "LanguageInformation",
    "LanguageList",
    "UsageInformation",
]
