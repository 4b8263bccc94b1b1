"""
Riemersma Dither — Web Edition

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image, ImageDraw

from riemersma.config import DitherConfig
from riemersma.engine import RiemersmaDither
from riemersma.image_io import ArraySource, make_sink
from riemersma.palette import NAMED_PALETTES

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Riemersma Dither",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = DitherConfig()
_MAX_SIDE = 512  # larger uploads are downscaled, the engine is pure Python

st.markdown("""
<style>
    .stApp { background-color: #faf9f6; color: #2a2a2a; }
    .label-detail {
        font-size: 0.7rem;
        letter-spacing: 0.06em;
        text-transform: uppercase;
        text-align: center;
        color: #a0a09a;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _add_passepartout(img: Image.Image, border: int = 20) -> Image.Image:
    w, h = img.size
    bg = (250, 249, 246)
    canvas = Image.new("RGB", (w + border * 2, h + border * 2), bg)
    canvas.paste(img.convert("RGB"), (border, border))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        [border - 1, border - 1, border + w, border + h],
        outline=(224, 222, 216), width=1,
    )
    return canvas


# -- Controls ----------------------------------------------------------

st.title("Riemersma Dither")
st.caption(
    "Error diffusion along a Hilbert curve: each pixel inherits a weighted "
    "share of the quantisation error of the last pixels visited."
)

ctrl1, ctrl2, ctrl3 = st.columns(3)
with ctrl1:
    queue_size = st.slider("History length", 1, 64, _DEFAULTS.queue_size)
with ctrl2:
    ratio = st.slider("Ratio", 0.5, 64.0, float(_DEFAULTS.ratio))
with ctrl3:
    target = st.selectbox(
        "Colours",
        ["1-bit gray", "2-bit gray", "4-bit gray", "8-bit gray", *NAMED_PALETTES],
    )

uploaded = st.file_uploader(
    "Select image", type=["png", "jpg", "jpeg", "bmp", "gif", "webp"],
)

if uploaded is not None:
    original = Image.open(uploaded).convert("RGBA")
    original.thumbnail((_MAX_SIDE, _MAX_SIDE))
    pixels = np.array(original, dtype=np.uint8)
    h, w = pixels.shape[:2]

    if target.endswith("gray"):
        cfg = DitherConfig(queue_size=queue_size, ratio=ratio, depth=int(target[0]))
    else:
        cfg = DitherConfig(queue_size=queue_size, ratio=ratio, palette=target)

    with st.spinner("Dithering ..."):
        t0 = time.perf_counter()
        sink = make_sink(w, h, cfg)
        RiemersmaDither(cfg.queue_size, cfg.ratio).run(ArraySource(pixels), sink)
        result = sink.to_image()
        elapsed = time.perf_counter() - t0

    col1, col2 = st.columns(2)
    with col1:
        st.image(_add_passepartout(original, border=12))
        st.markdown('<div class="label-detail">Source</div>', unsafe_allow_html=True)
    with col2:
        st.image(_add_passepartout(result, border=12))
        st.markdown(
            f'<div class="label-detail">{target}</div>', unsafe_allow_html=True,
        )

    buf = io.BytesIO()
    result.save(buf, format="PNG")
    st.download_button(
        "Download PNG",
        data=buf.getvalue(),
        file_name="riemersma.png",
        mime="image/png",
    )

    m1, m2 = st.columns(2)
    m1.metric("Resolution", f"{w} × {h}")
    m2.metric("Time", f"{elapsed:.1f} s")
else:
    st.markdown("*Select an image to begin.*")
