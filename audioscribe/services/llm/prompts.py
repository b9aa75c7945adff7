"""System and user prompts for the assistant operations."""

SUMMARIZE_SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes text concisely and accurately."
)


def build_summarize_prompt(text: str) -> str:
    return f"Please summarize the following text:\n\n{text}"


def build_translate_system_prompt(target_language: str) -> str:
    return f"You are a helpful assistant that translates text to {target_language}."


def build_translate_prompt(text: str, target_language: str) -> str:
    return f"Please translate the following text to {target_language}:\n\n{text}"


def build_chat_system_prompt(context: str) -> str:
    """Ground the conversation on the summary the user produced earlier."""
    return (
        "You are a helpful assistant discussing the following summary of content.\n"
        "Respond to user questions about this content.\n\n"
        f"Summary: {context}"
    )
