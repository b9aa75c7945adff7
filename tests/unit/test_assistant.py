"""Unit tests for AssistantService request adapters."""

import pytest

from audioscribe.core.exceptions import MissingParameterError, UpstreamFailureError
from audioscribe.services.assistant import AssistantService


@pytest.fixture
def assistant(mock_llm, mock_stt):
    return AssistantService(llm=mock_llm, stt=mock_stt)


class TestTranscribe:
    async def test_returns_text(self, assistant, mock_stt):
        text = await assistant.transcribe(b"audio-bytes", "memo.m4a")

        assert text == "This is a test transcription."
        mock_stt.transcribe.assert_awaited_once_with(b"audio-bytes", filename="memo.m4a")

    @pytest.mark.parametrize("audio", [None, b""])
    async def test_missing_audio(self, assistant, mock_stt, audio):
        with pytest.raises(MissingParameterError) as exc_info:
            await assistant.transcribe(audio, "x.wav")

        assert exc_info.value.status_code == 400
        mock_stt.transcribe.assert_not_awaited()

    async def test_upstream_failure_is_generic(self, assistant, mock_stt):
        mock_stt.transcribe.side_effect = RuntimeError("sk-secret leaked in message")

        with pytest.raises(UpstreamFailureError) as exc_info:
            await assistant.transcribe(b"audio", "a.wav")

        assert exc_info.value.detail == "Error processing audio"
        assert "sk-secret" not in exc_info.value.detail


class TestSummarize:
    async def test_prompts_and_limits(self, assistant, mock_llm):
        summary = await assistant.summarize("Long meeting notes")

        assert summary == "A short summary."
        args, kwargs = mock_llm.generate.call_args
        assert args[0] == "Please summarize the following text:\n\nLong meeting notes"
        assert "summarizes text concisely and accurately" in kwargs["system"]
        assert kwargs["max_tokens"] == 500

    async def test_reply_returned_unmodified(self, assistant, mock_llm):
        mock_llm.generate.return_value = "  spaced\n"

        assert await assistant.summarize("text") == "  spaced\n"

    @pytest.mark.parametrize("text", [None, ""])
    async def test_missing_text(self, assistant, mock_llm, text):
        with pytest.raises(MissingParameterError):
            await assistant.summarize(text)

        mock_llm.generate.assert_not_awaited()

    async def test_upstream_failure(self, assistant, mock_llm):
        mock_llm.generate.side_effect = TimeoutError("slow")

        with pytest.raises(UpstreamFailureError, match="Error summarizing text"):
            await assistant.summarize("text")


class TestTranslate:
    async def test_defaults_to_spanish(self, assistant, mock_llm):
        await assistant.translate("Good morning")

        args, kwargs = mock_llm.generate.call_args
        assert args[0] == "Please translate the following text to es:\n\nGood morning"
        assert kwargs["system"] == "You are a helpful assistant that translates text to es."
        assert kwargs["max_tokens"] == 1000

    async def test_explicit_language(self, assistant, mock_llm):
        mock_llm.generate.return_value = "Bonjour"

        assert await assistant.translate("Hello", "fr") == "Bonjour"
        assert "to fr" in mock_llm.generate.call_args.args[0]

    async def test_missing_text(self, assistant, mock_llm):
        with pytest.raises(MissingParameterError):
            await assistant.translate(None, "fr")

        mock_llm.generate.assert_not_awaited()

    async def test_upstream_failure(self, assistant, mock_llm):
        mock_llm.generate.side_effect = ConnectionError("down")

        with pytest.raises(UpstreamFailureError, match="Error translating text"):
            await assistant.translate("text")


class TestChat:
    async def test_summary_in_system_prompt(self, assistant, mock_llm):
        messages = [{"role": "user", "content": "What was decided?"}]

        reply = await assistant.chat(messages, "The team chose Postgres.")

        assert reply == "An answer about the summary."
        args, kwargs = mock_llm.chat.call_args
        assert args[0] == messages
        assert "Summary: The team chose Postgres." in kwargs["system"]
        assert kwargs["max_tokens"] == 500

    @pytest.mark.parametrize(
        ("messages", "context"),
        [
            (None, "summary"),
            ([], "summary"),
            ([{"role": "user", "content": "hi"}], None),
            ([{"role": "user", "content": "hi"}], ""),
        ],
    )
    async def test_missing_parameters(self, assistant, mock_llm, messages, context):
        with pytest.raises(MissingParameterError, match="Missing required parameters"):
            await assistant.chat(messages, context)

        mock_llm.chat.assert_not_awaited()

    async def test_upstream_failure(self, assistant, mock_llm):
        mock_llm.chat.side_effect = RuntimeError("boom")

        with pytest.raises(UpstreamFailureError, match="Error processing chat"):
            await assistant.chat([{"role": "user", "content": "hi"}], "summary")
