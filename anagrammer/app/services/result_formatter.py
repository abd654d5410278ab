"""Result formatting helpers for anagram searches."""

from __future__ import annotations

from typing import Iterable, List, Optional

from anagrammer.core import SearchOutcome, letters_only


class AnagramResultFormatter:
    """Render anagram results as markdown or copyable plain text."""

    def __init__(self, *, max_rendered: Optional[int] = None) -> None:
        self.max_rendered = max_rendered

    def format_results(self, phrase: str, outcome: SearchOutcome | List[List[str]]) -> str:
        """Render a numbered markdown list of results for ``phrase``."""

        if isinstance(outcome, SearchOutcome):
            results = outcome.results
            cancelled = outcome.cancelled
            required_satisfied = outcome.required_satisfied
        else:
            results = list(outcome or [])
            cancelled = False
            required_satisfied = True

        display_phrase = (phrase or "").strip()
        if not letters_only(display_phrase):
            return "❌ Enter a phrase containing letters to find anagrams."

        if not required_satisfied:
            return (
                f"❌ The focused words do not fit inside '{display_phrase}'. "
                "Remove one of them and try again."
            )

        if not results:
            return f"❌ No anagrams found for '{display_phrase}'. Try another word list or fewer removed words."

        shown = results
        if self.max_rendered is not None and len(results) > self.max_rendered:
            shown = results[: self.max_rendered]

        noun = "anagram" if len(results) == 1 else "anagrams"
        lines: List[str] = [f"### {len(results)} {noun} for '{display_phrase}'", ""]
        for index, words in enumerate(shown, start=1):
            lines.append(f"{index}. {' '.join(words)}")

        hidden = len(results) - len(shown)
        if hidden > 0:
            lines.append("")
            lines.append(f"_…and {hidden} more._")

        if cancelled:
            lines.append("")
            lines.append("⏱️ The search stopped early; these are the anagrams found so far.")

        return "\n".join(lines)

    def format_plain_text(self, results: Iterable[Iterable[str]]) -> str:
        """One anagram per line, words joined by spaces, ready to copy."""

        return "\n".join(" ".join(words) for words in results)

    def result_words(self, results: Iterable[Iterable[str]]) -> List[str]:
        """Distinct words across ``results`` in alphabetical order."""

        return sorted({word for words in results for word in words})


__all__ = ["AnagramResultFormatter"]
