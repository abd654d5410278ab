"""User interface assembly for the Gradio front-end."""

from __future__ import annotations

import concurrent.futures
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr

from anagrammer.core import SearchOutcome

from ..api import resolve_max_results, resolve_top_n
from ..services.search_service import SearchService, parse_word_list

TOP_N_OPTIONS: List[Tuple[str, str]] = [
    ("All words", ""),
    ("1,000 common words", "1000"),
    ("5,000 common words", "5000"),
    ("10,000 common words", "10000"),
    ("20,000 common words", "20000"),
]

MAX_RESULTS_OPTIONS: List[str] = ["50", "100", "200", "500", "1000"]
DEFAULT_MAX_RESULTS_OPTION = "50"

_DEFAULT_RESULTS_MESSAGE = "Enter a phrase above and click **Find anagrams**."
_LOG_PLACEHOLDER = "_Waiting for telemetry updates..._"


def add_word_to_list(current: Optional[str], word: Optional[str]) -> str:
    """Append ``word`` to a space separated list unless already present."""

    words = [entry.lower() for entry in parse_word_list(current)]
    candidate = (word or "").strip().lower()
    if candidate and candidate not in words:
        words.append(candidate)
    return " ".join(words)


def _format_live_events(snapshot: Dict[str, Any]) -> str:
    """Return a markdown representation of live telemetry events."""

    if not snapshot:
        return ""

    events = snapshot.get("events") or []
    counters = snapshot.get("counters") or {}

    if not events and not counters:
        return ""

    output: List[str] = ["#### Live search activity"]

    if events:
        output.append("")
        for event in events[-8:]:
            name = str(event.get("name", "event"))
            duration = event.get("duration")
            metadata = event.get("metadata") or {}
            meta_chunks = [f"{key}={value}" for key, value in metadata.items()]
            meta_suffix = f" – {', '.join(meta_chunks)}" if meta_chunks else ""
            if isinstance(duration, (float, int)):
                output.append(f"- `{name}` took {float(duration):.2f}s{meta_suffix}")
            else:
                output.append(f"- `{name}`{meta_suffix}")

    if counters:
        output.append("")
        output.append("**Counters**")
        output.append(", ".join(f"`{key}`: {value:g}" for key, value in counters.items()))

    return "\n".join(output)


def stream_search(
    search_service: SearchService,
    phrase: str,
    top_n: str,
    max_results: str,
    focused: str,
    removed: str,
    *,
    poll_interval: float = 0.25,
):
    """Run a search in a worker thread while streaming telemetry to the UI.

    Closing the generator (the browser went away) sets the search's cancel
    event, so the worker stops instead of running until its timeout.
    """

    formatter = search_service.formatter

    empty_picker = gr.update(choices=[], value=None)

    if not phrase or not phrase.strip():
        yield (
            "Please enter a phrase to anagram.",
            _LOG_PLACEHOLDER,
            _DEFAULT_RESULTS_MESSAGE,
            "",
            empty_picker,
        )
        return

    yield ("Finding anagrams...", _LOG_PLACEHOLDER, _DEFAULT_RESULTS_MESSAGE, "", empty_picker)

    last_rendered_log = _LOG_PLACEHOLDER
    outcome: Optional[SearchOutcome] = None
    start_time = time.perf_counter()

    cancel_event = threading.Event()

    try:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(
                search_service.run_search,
                phrase,
                parse_word_list(focused),
                parse_word_list(removed),
                resolve_top_n(top_n),
                resolve_max_results(max_results, search_service.default_max_results),
                cancel_event=cancel_event,
            )

            try:
                while True:
                    try:
                        outcome = future.result(timeout=poll_interval)
                        break
                    except concurrent.futures.TimeoutError:
                        elapsed = time.perf_counter() - start_time
                        log_markdown = _format_live_events(search_service.get_latest_telemetry())
                        if log_markdown:
                            last_rendered_log = log_markdown
                        yield (
                            f"Searching… {elapsed:.1f}s elapsed",
                            last_rendered_log,
                            _DEFAULT_RESULTS_MESSAGE,
                            "",
                            empty_picker,
                        )
            finally:
                # Stops the worker before the executor waits on it.
                cancel_event.set()
    except Exception:
        yield (
            "Search failed: could not find anagrams.",
            last_rendered_log,
            _DEFAULT_RESULTS_MESSAGE,
            "",
            empty_picker,
        )
        return

    elapsed = time.perf_counter() - start_time
    final_log = _format_live_events(search_service.get_latest_telemetry())
    if final_log:
        last_rendered_log = final_log

    yield (
        f"Search completed in {elapsed:.2f}s",
        last_rendered_log,
        formatter.format_results(phrase, outcome),
        formatter.format_plain_text(outcome.results),
        gr.update(choices=formatter.result_words(outcome.results), value=None),
    )


def create_interface(search_service: SearchService) -> gr.Blocks:
    """Construct the interactive Gradio Blocks UI."""

    def search_interface(
        phrase: str,
        top_n: str,
        max_results: str,
        focused: str,
        removed: str,
    ):
        yield from stream_search(search_service, phrase, top_n, max_results, focused, removed)

    def reset_interface():
        return (
            "",
            "",
            "",
            "Waiting to start a search…",
            _LOG_PLACEHOLDER,
            _DEFAULT_RESULTS_MESSAGE,
            "",
            gr.update(choices=[], value=None),
        )

    interface_css = """
    .af-container {max-width: 960px; margin: 0 auto; gap: 24px;}
    .af-hero {text-align: center; padding-bottom: 16px;}
    .af-panel {border: 1px solid rgba(15, 23, 42, 0.08); border-radius: 16px; background: #ffffff; padding: 24px;}
    .af-button {width: 100%; font-weight: 600;}
    .af-tip {color: #4b5563; font-size: 0.92rem; margin-top: 8px;}
    .af-status-card {background: #f1f5f9; border-radius: 12px; padding: 16px 18px;}
    .af-log {border-radius: 12px; border: 1px solid rgba(15, 23, 42, 0.06); padding: 16px 18px; max-height: 220px; overflow-y: auto;}
    """

    with gr.Blocks(title="Anagram Finder", theme=gr.themes.Soft(), css=interface_css) as interface:
        with gr.Column(elem_classes=["af-container"]):
            gr.Markdown(
                "<h2>🔤 Anagram Finder</h2>\n"
                "<p>Rearrange every letter of a phrase into new words.</p>",
                elem_classes=["af-hero"],
            )

            with gr.Group(elem_classes=["af-panel"]):
                phrase_input = gr.Textbox(
                    label="Phrase",
                    placeholder="Phrase to anagram",
                    lines=1,
                )
                with gr.Row():
                    top_n_dropdown = gr.Dropdown(
                        choices=TOP_N_OPTIONS,
                        value="",
                        label="Use top",
                    )
                    max_results_dropdown = gr.Dropdown(
                        choices=MAX_RESULTS_OPTIONS,
                        value=DEFAULT_MAX_RESULTS_OPTION,
                        label="Max results",
                    )
                with gr.Row():
                    focused_input = gr.Textbox(
                        label="Focused words",
                        placeholder="Words every anagram must contain",
                        lines=1,
                    )
                    removed_input = gr.Textbox(
                        label="Removed words",
                        placeholder="Words to leave out",
                        lines=1,
                    )
                with gr.Row():
                    find_btn = gr.Button(
                        "Find anagrams",
                        variant="primary",
                        elem_classes=["af-button"],
                    )
                    reset_btn = gr.Button("Reset", elem_classes=["af-button"])

            with gr.Group(elem_classes=["af-panel"]):
                status_md = gr.Markdown(
                    value="Waiting to start a search…",
                    elem_classes=["af-status-card"],
                )
                log_md = gr.Markdown(value=_LOG_PLACEHOLDER, elem_classes=["af-log"])
                results_md = gr.Markdown(value=_DEFAULT_RESULTS_MESSAGE)
                copy_box = gr.Textbox(
                    label="Copy anagrams",
                    lines=6,
                    interactive=False,
                    show_copy_button=True,
                )
                with gr.Row():
                    word_picker = gr.Dropdown(
                        choices=[],
                        label="Word from results",
                        info="Focus on a word or remove it from the word list",
                    )
                    focus_btn = gr.Button("Focus")
                    remove_btn = gr.Button("Remove")
                gr.Markdown(
                    "💡 Focused words appear in every anagram; removed words never do.",
                    elem_classes=["af-tip"],
                )

        search_inputs = [
            phrase_input,
            top_n_dropdown,
            max_results_dropdown,
            focused_input,
            removed_input,
        ]
        search_outputs = [status_md, log_md, results_md, copy_box, word_picker]

        find_btn.click(fn=search_interface, inputs=search_inputs, outputs=search_outputs)
        phrase_input.submit(fn=search_interface, inputs=search_inputs, outputs=search_outputs)

        reset_btn.click(
            fn=reset_interface,
            inputs=[],
            outputs=[
                phrase_input,
                focused_input,
                removed_input,
                status_md,
                log_md,
                results_md,
                copy_box,
                word_picker,
            ],
        )
        focus_btn.click(
            fn=add_word_to_list,
            inputs=[focused_input, word_picker],
            outputs=[focused_input],
        )
        remove_btn.click(
            fn=add_word_to_list,
            inputs=[removed_input, word_picker],
            outputs=[removed_input],
        )

    return interface


__all__ = [
    "MAX_RESULTS_OPTIONS",
    "TOP_N_OPTIONS",
    "add_word_to_list",
    "create_interface",
    "stream_search",
]
