"""
Translation prompt and output clean-up for LLM backends.

One prompt template is used for every chunk: it asks for a faithful document
translation that keeps the sentence structure and returns only target-language
text. ``clean_translation_output`` strips the wrappers chat models sometimes
add around an answer.
"""

import re
from dataclasses import dataclass
from typing import Dict

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "th": "Thai",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "vi": "Vietnamese",
    "id": "Indonesian",
}


def language_name(code: str) -> str:
    """Human-readable name for a language code (falls back to the code)."""
    return LANGUAGE_NAMES.get(code.lower().split("-")[0], code)


@dataclass(frozen=True)
class PromptTemplate:
    """Prompt with ``{source_lang}``, ``{target_lang}`` and ``{text}`` slots."""
    name: str
    system_prompt: str
    user_prompt_template: str

    def render(self, text: str, source_lang: str, target_lang: str):
        names = {"source_lang": language_name(source_lang), "target_lang": language_name(target_lang)}
        system = self.system_prompt.format(**names)
        user = self.user_prompt_template.format(text=text, **names)
        return system, user


DOCUMENT_TRANSLATOR = PromptTemplate(
    name="document_translator",
    system_prompt="You are a document translation system, {source_lang} to {target_lang}.",
    user_prompt_template="""Requirements:
- Keep the original sentence structure and intent
- Do not expand or cut content
- Keep proper nouns and technical terms transliterated, with the original in parentheses when needed

Input ({source_lang}):
{text}

Output: {target_lang} text only
""",
)


def build_translation_prompt(text: str, source_lang: str, target_lang: str):
    """Return (system_prompt, user_prompt) for one chunk."""
    return DOCUMENT_TRANSLATOR.render(text, source_lang, target_lang)


def clean_translation_output(text: str) -> str:
    """
    Remove chat-model wrappers from a translation.

    Strips ``<think>`` blocks, a whole-answer code fence and a leading
    "Translation:"-style label. Returns the input unchanged if cleaning
    would leave nothing.
    """
    if not text:
        return text

    original = text

    text = re.sub(r'<think(?:ing)?>.*?</think(?:ing)?>', '', text, flags=re.DOTALL | re.IGNORECASE)

    match = re.match(r'^```(?:\w+)?\s*\n(.*?)\n```\s*$', text.strip(), re.DOTALL)
    if match:
        text = match.group(1)

    text = re.sub(r'^(?:Translation|Translated text|Output):\s*', '', text.strip(), flags=re.IGNORECASE)
    text = text.strip()

    return text if text else original.strip()
