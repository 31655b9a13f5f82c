"""
CFaR Engine — Cash-Flow-at-Risk Dashboard
=========================================

Pick a currency pair and a monthly exposure, then compare:
  1. Unhedged:        every month converts at the simulated rate
  2. Selected hedge:  the chosen share of each month locked at the all-in forward
  3. 100% hedged:     the whole schedule locked at the same forward

The forward rate is optional; without it only the unhedged distribution is shown.

Run: streamlit run app/streamlit_app.py
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import altair as alt
import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import SimulationConfig
from data_prep.fx_dataset import FxDataset
from distributions.returns import summarize_returns
from pm.aggregator import Histogram
from service.handler import handle_cfar_request

DEFAULT_HOME = "GBP"
DEFAULT_EXPOSURE = "USD"
CCY_SYMBOLS = {"GBP": "£", "USD": "$", "EUR": "€", "JPY": "¥"}


# ---------------------------------------------------------------------------
# Cached loaders
# ---------------------------------------------------------------------------
@st.cache_resource(show_spinner="Loading FX history...")
def _dataset() -> FxDataset:
    return FxDataset.sample()


# ---------------------------------------------------------------------------
# Formatting / chart helpers
# ---------------------------------------------------------------------------
def _fmt_ccy(val, ccy):
    if val is None:
        return "—"
    return f"{CCY_SYMBOLS.get(ccy, ccy + ' ')}{val:,.0f}"


def _fmt_pct(val):
    return "—" if val is None else f"{val:.1f}%"


def _plot_histogram(block, *, title, ccy, height=300):
    """Pre-binned outcome histogram with mean and p5 markers."""
    hist = Histogram(**block["hist"])
    df_hist = hist.to_dataframe()
    bars = (
        alt.Chart(df_hist).mark_bar(opacity=0.8)
        .encode(
            x=alt.X("lower:Q", title=f"Total cash flow ({ccy})", axis=alt.Axis(format=",.0f")),
            x2="upper:Q",
            y=alt.Y("count:Q", title="Paths"),
            tooltip=["bin", "lower", "upper", "count"],
        )
    )
    markers = pd.DataFrame({
        "value": [block["mean"], block["p5"]],
        "label": ["Mean", "P5"],
    })
    rules = (
        alt.Chart(markers).mark_rule(strokeWidth=2)
        .encode(
            x="value:Q",
            color=alt.Color("label:N", title="",
                            scale=alt.Scale(domain=["Mean", "P5"], range=["#1f77b4", "#d62728"])),
        )
    )
    st.altair_chart((bars + rules).properties(title=title, height=height), use_container_width=True)


def _plot_closes(history, height=220):
    df = history.to_dataframe()
    chart = (
        alt.Chart(df).mark_line()
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("close:Q", title=history.pair, scale=alt.Scale(zero=False)),
        )
        .properties(title="Monthly closes", height=height)
    )
    st.altair_chart(chart, use_container_width=True)


def _result_panel(col, title, block, ccy):
    with col:
        st.markdown(f"**{title}**")
        if block is None:
            st.info("Enter a forward rate to see hedged results.")
            return
        st.metric("Mean", _fmt_ccy(block["mean"], ccy))
        st.metric("P5 (worst 5%)", _fmt_ccy(block["p5"], ccy))
        st.metric("CFaR (mean − p5)", _fmt_ccy(block["cfar"], ccy))
        if "riskReductionPct" in block:
            st.metric("Risk reduction", _fmt_pct(block["riskReductionPct"]))


# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
st.set_page_config(page_title="CFaR Engine", layout="wide")
st.title("CFaR Engine")
st.caption("Cash-Flow-at-Risk for foreign-currency receivables: bootstrap FX paths, rolling forward hedges")

dataset = _dataset()

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR: Inputs
# ═══════════════════════════════════════════════════════════════════════════
with st.sidebar:
    st.header("Exposure")

    homes = sorted({p[:3] for p in dataset.pairs()})
    if not homes:
        st.error("No FX pairs available")
        st.stop()
    home_ccy = st.selectbox(
        "Home currency", options=homes,
        index=homes.index(DEFAULT_HOME) if DEFAULT_HOME in homes else 0,
    )
    exposures_for_home = dataset.exposure_currencies(home_ccy)
    exposure_ccy = st.selectbox(
        "Exposure currency", options=exposures_for_home,
        index=exposures_for_home.index(DEFAULT_EXPOSURE) if DEFAULT_EXPOSURE in exposures_for_home else 0,
    )

    monthly_amount = st.number_input(
        f"Monthly exposure ({exposure_ccy})", min_value=0.0, value=100_000.0, step=10_000.0,
    )
    months = st.slider("Months", min_value=1, max_value=24, value=12)
    sims = st.select_slider("Simulations", options=[1000, 2000, 5000, 10000, 20000], value=5000)

    st.header("Hedge")
    forward_text = st.text_input("All-in forward rate (optional)", value="")
    hedge_pct = st.slider("Hedge ratio (%)", min_value=0, max_value=100, value=50, step=5)
    seed = st.number_input("Seed", min_value=0, value=SimulationConfig().seed, step=1)

    run_clicked = st.button("Run simulation", type="primary", use_container_width=True)

history = dataset.get(home_ccy, exposure_ccy)
rets = summarize_returns(history.returns)
c1, c2, c3, c4 = st.columns(4)
c1.metric("Pair", history.pair)
c2.metric("Spot", f"{history.spot:.4f}")
c3.metric("Months of history", str(len(history.closes)))
c4.metric("Monthly return vol", f"{rets.std:.2%}")
with st.expander("Rate history"):
    _plot_closes(history)
    st.caption(repr(rets))

# ═══════════════════════════════════════════════════════════════════════════
# RUN
# ═══════════════════════════════════════════════════════════════════════════
if run_clicked:
    payload = {
        "homeCcy": home_ccy,
        "exposureCcy": exposure_ccy,
        "exposures": [monthly_amount] * int(months),
        "months": int(months),
        "sims": int(sims),
        "forwardRate": forward_text.strip() or None,
        "hedgeRatio": hedge_pct / 100.0,
        "seed": int(seed),
    }
    with st.spinner(f"Simulating {sims:,} paths..."):
        status, body = handle_cfar_request(payload, dataset)
    st.session_state["cfar_response"] = (status, body)

response = st.session_state.get("cfar_response")
if response is None:
    st.info("Set the inputs in the sidebar and click **Run simulation**.")
    st.stop()

status, body = response
if status != 200:
    st.error(f"Request failed ({status}): {body.get('error')}")
    st.stop()

st.divider()
ccy = body["pair"][:3]
p1, p2, p3 = st.columns(3)
_result_panel(p1, "Unhedged", body["unhedged"], ccy)
_result_panel(p2, f"Selected hedge ({body['hedgeRatio']:.0%})", body["selected"], ccy)
_result_panel(p3, "100% hedged", body["fullyHedged"], ccy)

st.divider()
options = ["Unhedged"] + (["Hedged"] if body["hedged"] is not None else [])
which = st.radio("Histogram", options=options, horizontal=True)
if which == "Hedged":
    _plot_histogram(body["hedged"], title="Hedged outcome distribution", ccy=ccy)
else:
    _plot_histogram(body["unhedged"], title="Unhedged outcome distribution", ccy=ccy)

with st.expander("Raw response JSON"):
    st.code(json.dumps(body, indent=2), language="json")
