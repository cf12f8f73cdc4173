"""Language registry for the ephemeral execution runner.

Each entry maps a language to the image it runs in and the interpreter
invocation that evaluates a code string passed as a single argument.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class LanguageConfig:
    """Execution environment for a programming language."""

    code: str  # Canonical tag: "python", "javascript"
    name: str  # Display name
    image: str  # Default container image
    interpreter: List[str]  # Invocation prefix, the code is appended as one argv entry
    aliases: tuple = field(default_factory=tuple)

    def build_command(self, code: str) -> List[str]:
        """Build the exec argv that evaluates ``code``."""
        return [*self.interpreter, code]


LANGUAGES: dict[str, LanguageConfig] = {
    "python": LanguageConfig(
        code="python",
        name="Python",
        image="python:3-slim",
        interpreter=["python", "-c"],
        aliases=("py", "python3"),
    ),
    "javascript": LanguageConfig(
        code="javascript",
        name="JavaScript",
        image="node:lts-alpine",
        interpreter=["node", "-e"],
        aliases=("js", "node"),
    ),
}

_ALIASES: dict[str, str] = {
    alias: lang.code for lang in LANGUAGES.values() for alias in lang.aliases
}


def normalize_language(code: str) -> str:
    """Resolve a language tag or alias to its canonical tag."""
    key = (code or "").lower().strip()
    return _ALIASES.get(key, key)


def get_language(code: str) -> LanguageConfig | None:
    """Get language configuration by tag or alias."""
    return LANGUAGES.get(normalize_language(code))


def get_supported_languages() -> list[str]:
    """Get list of canonical language tags."""
    return list(LANGUAGES.keys())


def is_supported_language(code: str) -> bool:
    """Check if a language tag or alias is supported."""
    return normalize_language(code) in LANGUAGES
