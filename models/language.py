"""Languages supported by prompts, titles and localized replies."""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """UI and prompt language code."""

    EN = "en"
    NP = "np"

    @classmethod
    def parse(cls, value: "Language | str | None") -> "Language":
        """Return the Language for a code, defaulting to English when empty.

        Raises:
            ValueError: If the code is not a supported language.
        """
        if value is None or value == "":
            return cls.EN
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported language '{value}'. Supported: en, np") from exc
