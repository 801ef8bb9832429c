# frontend/streamlit_app.py
from __future__ import annotations

import json
from datetime import date
from typing import Any

import streamlit as st

import frontend_api as api

MIN_TRANSCRIPT_CHARS = 50


# ---------------------------
# UI helpers
# ---------------------------
def _ensure_session_state() -> None:
    if "deck" not in st.session_state:
        st.session_state.deck = None
    if "transcript" not in st.session_state:
        st.session_state.transcript = ""
    if "error" not in st.session_state:
        st.session_state.error = None
    if "slide_idx" not in st.session_state:
        st.session_state.slide_idx = 0


def _show_error(exc: api.ApiError) -> None:
    st.session_state.error = {"message": exc.message, "hint": exc.hint}


def _render_error_banner() -> None:
    err = st.session_state.error
    if not err:
        return
    with st.container(border=True):
        c1, c2 = st.columns([10, 1])
        c1.error(err["message"])
        if err.get("hint"):
            c1.caption(err["hint"])
        if c2.button("✕", key="dismiss-error", help="Dismiss"):
            st.session_state.error = None
            st.rerun()


def _points_from_text(text: str) -> list[str]:
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def _deck_key(deck: dict[str, Any]) -> str:
    return json.dumps(deck, sort_keys=True)


@st.cache_data(show_spinner=False, max_entries=32)
def _export(kind: str, deck_key: str) -> bytes:
    # Keyed by deck content so reruns reuse the last export instead of re-posting
    exporters = {"html": api.export_html, "print": api.export_print, "summary": api.export_summary}
    return exporters[kind](json.loads(deck_key))


# ---------------------------
# Actions
# ---------------------------
def _generate(transcript: str) -> None:
    st.session_state.error = None
    with st.spinner("Generating summary and slides..."):
        try:
            # A new generation always replaces the previous deck
            st.session_state.deck = api.summarize(transcript)
            st.session_state.slide_idx = 0
        except api.ApiError as exc:
            st.session_state.deck = None
            _show_error(exc)


def _transcribe_and_generate(upload: Any) -> None:
    st.session_state.error = None
    with st.spinner("Transcribing audio..."):
        try:
            transcript = api.transcribe(upload.name, upload.getvalue(), upload.type or "audio/mpeg")
        except api.ApiError as exc:
            _show_error(exc)
            return
    st.session_state.transcript = transcript
    _generate(transcript)


def _save_edits(deck: dict[str, Any]) -> None:
    slides = []
    for idx, slide in enumerate(deck["slides"]):
        title = st.session_state.get(f"edit-title-{idx}", slide.get("title", ""))
        points = _points_from_text(st.session_state.get(f"edit-points-{idx}", ""))
        slides.append({**slide, "title": title, "points": points})
    st.session_state.deck = {**deck, "slides": slides}
    st.toast("Slides updated")


# ---------------------------
# Sections
# ---------------------------
def _input_section() -> None:
    paste_tab, audio_tab = st.tabs(["📝 Paste transcript", "🎙️ Upload audio"])

    with paste_tab:
        transcript = st.text_area(
            "Meeting transcript",
            value=st.session_state.transcript,
            height=240,
            placeholder="Paste the meeting transcript here...",
        )
        too_short = len(transcript) < MIN_TRANSCRIPT_CHARS
        if transcript and too_short:
            st.caption(f"At least {MIN_TRANSCRIPT_CHARS} characters are required.")
        if st.button("✨ Generate summary & slides", disabled=too_short, use_container_width=True):
            st.session_state.transcript = transcript
            _generate(transcript)

    with audio_tab:
        upload = st.file_uploader(
            "Audio recording",
            type=["mp3", "wav", "m4a", "ogg", "flac", "webm"],
            help="Audio is transcribed by a hosted speech-recognition model (max 50MB).",
        )
        if st.button("🎧 Transcribe & generate", disabled=upload is None, use_container_width=True):
            _transcribe_and_generate(upload)


def _summary_section(deck: dict[str, Any]) -> None:
    st.header("Summary")
    st.write(deck.get("summary", ""))
    try:
        summary_txt = _export("summary", _deck_key(deck))
    except api.ApiError as exc:
        st.warning(exc.message)
    else:
        st.download_button(
            "⬇️ Download summary",
            data=summary_txt,
            file_name=f"meeting-summary-{date.today().isoformat()}.txt",
            mime="text/plain",
        )


def _slide_card(slide: dict[str, Any], idx: int, total: int) -> None:
    with st.container(border=True):
        st.caption(f"Slide {idx + 1} of {total}")
        st.subheader(slide.get("title") or "Untitled")
        for point in slide.get("points") or []:
            st.markdown(f"- {point}")


def _presentation_view(slides: list[dict[str, Any]]) -> None:
    total = len(slides)
    idx = min(max(st.session_state.slide_idx, 0), total - 1)
    st.session_state.slide_idx = idx

    _slide_card(slides[idx], idx, total)

    prev_col, counter_col, next_col = st.columns([1, 2, 1])
    if prev_col.button("◀ Prev", disabled=idx == 0, use_container_width=True):
        st.session_state.slide_idx = idx - 1
        st.rerun()
    counter_col.markdown(
        f"<div style='text-align:center'>{idx + 1} / {total}</div>", unsafe_allow_html=True
    )
    if next_col.button("Next ▶", disabled=idx >= total - 1, use_container_width=True):
        st.session_state.slide_idx = idx + 1
        st.rerun()


def _export_buttons(deck: dict[str, Any]) -> None:
    key = _deck_key(deck)
    try:
        html = _export("html", key)
        printable = _export("print", key)
    except api.ApiError as exc:
        st.warning(exc.message)
        return

    html_col, print_col = st.columns(2)
    html_col.download_button(
        "🖥️ Export presentation (HTML)",
        data=html,
        file_name=f"presentation-{date.today().isoformat()}.html",
        mime="text/html",
        use_container_width=True,
    )
    print_col.download_button(
        "🖨️ Export for print / PDF",
        data=printable,
        file_name=f"presentation-print-{date.today().isoformat()}.html",
        mime="text/html",
        help="Opens the browser's print dialog; choose 'Save as PDF'.",
        use_container_width=True,
    )


def _slides_section(deck: dict[str, Any]) -> None:
    st.header("Slides")
    slides = deck.get("slides") or []
    if not slides:
        st.info("No slides were generated.")
        return

    if st.toggle("🎬 Presentation mode", key="presenting"):
        _presentation_view(slides)
    else:
        for idx, slide in enumerate(slides):
            _slide_card(slide, idx, len(slides))

    with st.expander("✏️ Edit slides"):
        with st.form("edit-slides"):
            for idx, slide in enumerate(slides):
                st.text_input("Title", value=str(slide.get("title") or ""), key=f"edit-title-{idx}")
                st.text_area(
                    "Points (one per line)",
                    value="\n".join(str(p) for p in slide.get("points") or []),
                    key=f"edit-points-{idx}",
                )
                st.divider()
            if st.form_submit_button("Save changes", use_container_width=True):
                _save_edits(deck)
                st.rerun()

    _export_buttons(st.session_state.deck)



# ---------------------------
# App
# ---------------------------
def main() -> None:
    st.set_page_config(page_title="Meeting Summarizer", page_icon="🎙️", layout="wide")
    _ensure_session_state()

    st.title("🎙️ Meeting Summarizer")
    st.write("Turn a meeting transcript or recording into a summary and an editable slide deck.")

    _input_section()
    _render_error_banner()

    deck = st.session_state.deck
    if deck:
        st.divider()
        _summary_section(deck)
        _slides_section(deck)


# ---------------------------
# Entrypoint
# ---------------------------
if __name__ == "__main__":
    main()
