import os
import sys

import streamlit as st

_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

from pispigot.config import DEFAULT_DIGITS
from pispigot.formats import COMPRESSIONS, FORMATS, apply_compression, final_filename, serialize_payload
from pispigot.render import timed_render
from pispigot.verify import verify_digits


def _style():
    st.markdown(
        """
        <style>
        :root {--bg0:#0b132b;--bg1:#16213e;--fg:#e5e7eb}
        .stApp {background: linear-gradient(180deg, var(--bg0), var(--bg1))}
        .title-wrap {padding: 24px 20px 10px; border-bottom: 1px solid rgba(255,255,255,.08); margin-bottom: 12px}
        .title {font-weight: 800; font-size: 28px; color: white}
        .subtitle {color: var(--fg); opacity:.8; margin-top: 6px}
        </style>
        """,
        unsafe_allow_html=True,
    )


def _header():
    st.markdown(
        """
        <div class="title-wrap">
          <div class="title">pispigot</div>
          <div class="subtitle">decimal digits of π, one carry at a time.</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def main():
    st.set_page_config(page_title="pispigot", page_icon="π", layout="wide")
    _style()
    _header()
    if "history" not in st.session_state:
        st.session_state.history = []
    with st.sidebar:
        digits = st.number_input("Digits after point", min_value=0, max_value=200_000, value=DEFAULT_DIGITS, step=1000, key="digits")
        fmt = st.selectbox("Format", options=list(FORMATS), index=0, key="fmt")
        compression = st.selectbox("Compression", options=list(COMPRESSIONS), index=0, key="compression")
        verify = st.checkbox("Verify against mpmath", value=False, key="verify")
        filename = st.text_input("Filename stem", value="pi", key="out")
        if digits >= 50_000:
            st.warning("The spigot is quadratic in the digit count; this will take a while.")
        generate = st.button("Generate", type="primary", use_container_width=True)

    if not generate:
        if st.session_state.history:
            st.subheader("Recent runs")
            for item in st.session_state.history[:5]:
                st.write(item)
        return

    with st.spinner("Running the spigot..."):
        display, elapsed_ms = timed_render(int(digits))
    if verify:
        ok, index = verify_digits([int(ch) for ch in display[2:]])
        if ok:
            st.success("Verification passed")
        else:
            st.error(f"Verification failed at digit {index}")
            return
    meta = {"constant": "pi", "digits": int(digits), "engine": "spigot", "elapsed_ms": round(elapsed_ms, 3)}
    payload, mime = serialize_payload(display, fmt, meta)
    payload, suffix = apply_compression(payload, compression)
    if suffix:
        mime = "application/gzip"
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Digits", f"{int(digits):,}")
    with col2:
        st.metric("Size (bytes)", f"{len(payload):,}")
    with col3:
        st.metric("Time (ms)", f"{elapsed_ms:,.0f}")
    st.code(display[:5000] + ("\n…" if len(display) > 5000 else ""), language="text")
    download_name = final_filename(filename, fmt, suffix)
    st.download_button("Download", data=payload, file_name=download_name, mime=mime, use_container_width=True)
    st.code(f"python3 -m pispigot generate --digits {int(digits)} --format {fmt} --compression {compression} --out {filename}", language="bash")
    st.session_state.history.insert(0, f"{int(digits)} digits in {elapsed_ms:.0f} ms -> {download_name}")


if __name__ == "__main__":
    main()
