from anagrammer.app.services.result_formatter import AnagramResultFormatter
from anagrammer.core import SearchOutcome


def test_format_results_numbers_each_anagram():
    formatter = AnagramResultFormatter()

    markdown = formatter.format_results(" Dormitory ", [["dormitory"], ["dirty", "room"]])

    assert markdown.splitlines()[0] == "### 2 anagrams for 'Dormitory'"
    assert "1. dormitory" in markdown
    assert "2. dirty room" in markdown


def test_format_results_explains_empty_outcomes():
    formatter = AnagramResultFormatter()

    assert formatter.format_results("123", []).startswith("❌ Enter a phrase")
    assert formatter.format_results("zzz", []).startswith("❌ No anagrams found for 'zzz'")

    unsatisfied = SearchOutcome(required_satisfied=False)
    assert "focused words do not fit" in formatter.format_results("listen", unsatisfied)


def test_format_results_notes_partial_searches():
    formatter = AnagramResultFormatter()
    outcome = SearchOutcome(results=[["listen"]], cancelled=True)

    markdown = formatter.format_results("listen", outcome)

    assert markdown.startswith("### 1 anagram for 'listen'")
    assert "stopped early" in markdown


def test_format_results_truncates_long_lists():
    formatter = AnagramResultFormatter(max_rendered=1)

    markdown = formatter.format_results("evil", [["evil"], ["live"], ["vile"]])

    assert "1. evil" in markdown
    assert "2. live" not in markdown
    assert "and 2 more" in markdown


def test_plain_text_and_result_words():
    formatter = AnagramResultFormatter()
    results = [["dirty", "room"], ["dormitory"]]

    assert formatter.format_plain_text(results) == "dirty room\ndormitory"
    assert formatter.format_plain_text([]) == ""
    assert formatter.result_words(results + [["room", "dirty"]]) == ["dirty", "dormitory", "room"]
