import json

import pytest

from deepl_api import (
    APIConfig,
    DeserializationError,
    ErrorKind,
    InvalidInputError,
    LanguageInformation,
    ServerError,
    SplitSentences,
    Formality,
    TranslatableTextList,
    TranslatedText,
    TranslationOptions,
    UsageInformation,
)


class TestTranslatableTextList:
    def test_to_form_keeps_text_order(self) -> None:
        text_list = TranslatableTextList(target_language="EN-US", texts=["eins", "zwei", "drei"], source_language="DE")

        assert text_list.to_form() == [
            ("target_lang", "EN-US"),
            ("source_lang", "DE"),
            ("text", "eins"),
            ("text", "zwei"),
            ("text", "drei"),
        ]

    def test_to_form_omits_missing_source(self) -> None:
        assert TranslatableTextList(target_language="DE", texts=["x"]).to_form() == [
            ("target_lang", "DE"),
            ("text", "x"),
        ]


class TestTranslationOptions:
    def test_empty_options_send_nothing(self) -> None:
        assert TranslationOptions().to_form() == []

    def test_all_options(self) -> None:
        options = TranslationOptions(
            split_sentences=SplitSentences.PUNCTUATION,
            preserve_formatting=True,
            formality=Formality.MORE,
        )

        assert options.to_form() == [
            ("split_sentences", "nonewlines"),
            ("preserve_formatting", "1"),
            ("formality", "more"),
        ]


class TestResponseModels:
    def test_translated_text_from_dict(self) -> None:
        result = TranslatedText.from_dict({"detected_source_language": "DE", "text": "yes"})

        assert result == TranslatedText(detected_source_language="DE", text="yes")
        assert json.loads(result.to_json()) == {"detected_source_language": "DE", "text": "yes"}

    def test_translated_text_missing_text(self) -> None:
        with pytest.raises(DeserializationError):
            TranslatedText.from_dict({"detected_source_language": "DE"})

    def test_language_information_ignores_non_bool_formality(self) -> None:
        language = LanguageInformation.from_dict({"language": "JA", "name": "Japanese", "supports_formality": "yes"})

        assert language.supports_formality is None
        assert language.to_dict() == {"language": "JA", "name": "Japanese", "supports_formality": None}

    @pytest.mark.parametrize(
        "payload",
        [
            {"character_count": "10", "character_limit": 100},
            {"character_count": True, "character_limit": 100},
            {"character_limit": 100},
            ["character_count", "character_limit"],
        ],
    )
    def test_usage_information_rejects_bad_payloads(self, payload) -> None:
        with pytest.raises(DeserializationError):
            UsageInformation.from_dict(payload)

    def test_usage_limit_reached(self) -> None:
        usage = UsageInformation(character_count=500, character_limit=500)

        assert usage.limit_reached
        assert usage.characters_remaining == 0


class TestErrors:
    def test_server_error_str(self) -> None:
        error = ServerError("Quota exceeded", status_code=456, endpoint="/translate")

        assert str(error) == (
            "An error occurred while communicating with the DeepL server: 'Quota exceeded'. "
            "| status=456 | endpoint=/translate"
        )
        assert error.to_dict() == {
            "kind": "server",
            "message": "An error occurred while communicating with the DeepL server: 'Quota exceeded'.",
            "status_code": 456,
            "endpoint": "/translate",
        }

    def test_kind_is_per_class(self) -> None:
        assert DeserializationError().kind is ErrorKind.DESERIALIZATION
        assert InvalidInputError("bad").kind is ErrorKind.INVALID_INPUT


class TestAPIConfig:
    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("DEEPL_API_KEY", "DEEPL_FREE_TIER", "DEEPL_TIMEOUT", "DEEPL_BASE_URL"):
            monkeypatch.delenv(name, raising=False)

        assert APIConfig.from_env() == APIConfig()

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEEPL_API_KEY", "key")
        monkeypatch.setenv("DEEPL_FREE_TIER", "yes")
        monkeypatch.setenv("DEEPL_TIMEOUT", "12.5")
        monkeypatch.setenv("DEEPL_BASE_URL", "http://localhost:8080/v2")

        assert APIConfig.from_env() == APIConfig(
            api_key="key", free_tier=True, timeout=12.5, base_url="http://localhost:8080/v2"
        )

    def test_free_tier_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEEPL_FREE_TIER", "0")

        assert APIConfig.from_env().free_tier is False

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEEPL_TIMEOUT", "soon")

        with pytest.raises(InvalidInputError):
            APIConfig.from_env()
