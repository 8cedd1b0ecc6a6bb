# main.py

"""Streamlit web UI for the profanity filter.

Provides a simple interface to submit text and view the filtered version,
the matched terms, and the classifier's category scores.
"""

import asyncio
import logging
import re

import streamlit as st

from profanity_filter.core.definitions import ClassifierStatus
from profanity_filter.core.exceptions import FilterError
from profanity_filter.logging_config import configure_logging
from profanity_filter.service.config import settings
from profanity_filter.service.pipeline import (
    enhanced_filter_profanity,
    filter_profanity,
    highlight_profanity,
)

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

WORDLIST_MODE = "Word list"
ENHANCED_MODE = "AI enhanced"

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|~<>:$])")


def escape_markdown(text: str) -> str:
    """Backslash-escapes characters Streamlit markdown would interpret."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def render_categories(result) -> None:
    """Shows per-category classifier scores when the classifier ran."""
    detection = result.ai_detection
    if detection is None:
        if result.metadata.get("classifier") == ClassifierStatus.UNAVAILABLE:
            st.info("AI detection is unavailable; showing word list results.")
        return

    st.subheader("AI Detection")
    st.table(
        [
            {
                "Category": c.label,
                "Probability": f"{c.probability:.2%}",
                "Flagged": "yes" if c.match else "",
            }
            for c in detection.categories
        ]
    )


def main():
    """Run the Streamlit application UI."""
    st.set_page_config(layout="wide", page_title="Profanity Filter", page_icon="🧼")

    st.title("Profanity Filter")
    st.markdown(
        "Masks disallowed words and phrases, optionally refined by a toxicity classifier."
    )
    st.markdown("---")

    mode = st.radio("Mode", [WORDLIST_MODE, ENHANCED_MODE], horizontal=True)

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Input Text")
        text_input = st.text_area(
            "Source Text", height=300, placeholder="Type text to filter..."
        )

        if text_input:
            preview = highlight_profanity(
                text_input, template=":red[**{0}**]", escape=escape_markdown
            )
            if preview.has_matches:
                st.markdown(preview.highlighted_text)

    with col2:
        st.subheader("Filtered Output")

        if not text_input:
            st.caption("Type text on the left to filter it.")
            return

        try:
            if mode == ENHANCED_MODE:
                with st.spinner("Running AI detection..."):
                    result = asyncio.run(enhanced_filter_profanity(text_input))
            else:
                result = filter_profanity(text_input)

        except FilterError:
            st.error("The filter could not be initialized.")
            logger.error(
                "Filtering failed in UI",
                exc_info=True,
                extra={"text_length": len(text_input)},
            )
            return

        st.text_area("Filtered Text", value=result.filtered_text, height=300)

        if result.was_filtered:
            st.warning(f"Filtered {len(result.matches)} term(s).")
            st.write(", ".join(sorted(result.matches)))
        else:
            st.success("No disallowed content found.")

        render_categories(result)


if __name__ == "__main__":
    main()
