"""
Wealth Projector — Pockets Dashboard
====================================

Per-pocket balances, contributions and expected returns in; projection chart,
allocation donut and 5/10/20-year KPIs out. One pocket can also hold an
externally priced BTC quantity, refreshed from a live quote.

Run: streamlit run app/streamlit_app.py   (or the `wealth-projector` command)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict

import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from streamlit import runtime

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import PriceFeedSettings, ProjectionConfig
from core.log import configure_logging
from core.schema import (
    EXTERNAL_HOLDING_POCKET,
    ExternalHolding,
    Pocket,
    default_pockets,
)
from data_prep.loader import import_pockets_csv
from data_prep.validators import validate_pockets
from engine.runner import ProjectionResult, run_projection
from pricing.feed import PriceFeed

from app.formatting import fmt_axis_k, fmt_eur, fmt_pct

logger = logging.getLogger(__name__)

HORIZON_CHOICES = (5, 10, 20)
STEP_BALANCE = 500.0
STEP_MONTHLY = 50.0
STEP_RATE_PCT = 0.5
STEP_MANUAL_RATE_PCT = 0.25
STEP_BTC = 0.01


# ---------------------------------------------------------------------------
# Cached resources
# ---------------------------------------------------------------------------
@st.cache_resource
def _price_feed() -> PriceFeed:
    return PriceFeed(PriceFeedSettings.from_env())


def _init_state() -> None:
    if "pockets" not in st.session_state:
        st.session_state["pockets"] = default_pockets()
    st.session_state.setdefault("btc_quantity", 0.0)


# ---------------------------------------------------------------------------
# Chart helpers
# ---------------------------------------------------------------------------
def _plot_projection(result: ProjectionResult, height: int = 340) -> None:
    df = result.series.to_frame()
    if len(df) == 0:
        st.info("No data to plot.")
        return
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=df["label"], y=df["total_nominal"], mode="lines", name="Valeur",
        line=dict(width=2),
    ))
    fig.add_trace(go.Scatter(
        x=df["label"], y=df["contribution"], mode="lines", name="Contributions cumulées",
        line=dict(width=1.5, dash="dash"),
    ))
    if not df["total_real"].equals(df["total_nominal"]):
        fig.add_trace(go.Scatter(
            x=df["label"], y=df["total_real"], mode="lines", name="Valeur réelle",
            line=dict(width=1.5, dash="dot"),
        ))
    tick_step = max(len(df) // 8, 1)
    ticks = df["total_nominal"].quantile([0, 0.25, 0.5, 0.75, 1.0]).tolist()
    fig.update_layout(
        height=height,
        margin=dict(l=0, r=20, t=10, b=0),
        xaxis=dict(tickmode="array", tickvals=df["label"].iloc[::tick_step].tolist()),
        yaxis=dict(tickmode="array", tickvals=ticks, ticktext=[fmt_axis_k(v) for v in ticks]),
        legend=dict(orientation="h"),
    )
    st.plotly_chart(fig, use_container_width=True)


def _plot_allocation(result: ProjectionResult, height: int = 340) -> None:
    if not result.allocation:
        st.info("No positive balance to allocate.")
        return
    fig = go.Figure(go.Pie(
        labels=[e.label for e in result.allocation],
        values=[e.value for e in result.allocation],
        marker=dict(colors=[e.color for e in result.allocation]),
        hole=0.6,
        texttemplate="%{label} %{percent:.0%}",
        hovertemplate="%{label}: %{value:,.0f} €<extra></extra>",
        sort=False,
    ))
    fig.update_layout(height=height, margin=dict(l=0, r=0, t=10, b=0), showlegend=True)
    st.plotly_chart(fig, use_container_width=True)


# ---------------------------------------------------------------------------
# Input widgets
# ---------------------------------------------------------------------------
def _pocket_inputs(pockets: Dict[str, Pocket], btc_price) -> Dict[str, Pocket]:
    """Render one card per pocket and return the edited mapping (new Pocket objects)."""
    edited: Dict[str, Pocket] = {}
    cols = st.columns(2)
    for i, (key, p) in enumerate(pockets.items()):
        with cols[i % 2].container(border=True):
            st.markdown(f"**{p.label}**")
            initial = st.number_input(
                "Solde initial", value=float(p.initial_balance), min_value=0.0,
                step=STEP_BALANCE, key=f"{key}_initial",
            )
            monthly = st.number_input(
                "Apport mensuel", value=float(p.monthly_contribution),
                step=STEP_MONTHLY, key=f"{key}_monthly",
            )
            rate_pct = st.number_input(
                "Rendement attendu (%)", value=float(p.expected_annual_return) * 100,
                step=STEP_RATE_PCT, format="%.2f", key=f"{key}_rate",
            )
            if key == EXTERNAL_HOLDING_POCKET:
                qty = st.number_input(
                    "Bitcoin – quantité (BTC)", value=float(st.session_state["btc_quantity"]),
                    min_value=0.0, step=STEP_BTC, format="%.4f", key="btc_quantity_input",
                )
                st.session_state["btc_quantity"] = qty
                st.text_input(
                    "Valeur BTC incluse",
                    value=fmt_eur(qty * btc_price) if btc_price else "–",
                    disabled=True, key="btc_value_display",
                )
            edited[key] = Pocket(
                key=key,
                label=p.label,
                initial_balance=initial,
                monthly_contribution=monthly,
                expected_annual_return=rate_pct / 100.0,
            )
    return edited


def _kpi_row(result: ProjectionResult) -> None:
    k_cols = st.columns(len(result.kpis) or 1)
    for col, k in zip(k_cols, result.kpis):
        with col.container(border=True):
            st.metric(f"Dans {k.years} ans", fmt_eur(k.value))
            st.caption(
                f"Apports cumulés : {fmt_eur(k.contributions)} • "
                f"Intérêts cumulés : {fmt_eur(k.interest)}"
            )


def _price_ticker(feed: PriceFeed) -> None:
    """Refresh the quote on a timer and rerun the page when it moves."""

    @st.fragment(run_every=feed.settings.refresh_seconds)
    def _tick() -> None:
        if feed.tick(st.session_state.get("shown_price")):
            st.rerun()

    _tick()


def _import_sidebar() -> None:
    st.subheader("Import")
    for w in st.session_state.get("import_warnings", ()):
        st.warning(w)
    uploaded = st.file_uploader("Poches (CSV)", type=["csv"])
    if uploaded is None or not st.button("Charger", use_container_width=True):
        return
    try:
        loaded, check = import_pockets_csv(uploaded)
    except ValueError as e:
        st.error(f"Import impossible : {e}")
        return
    if not check.is_valid:
        st.error(check.summary())
        return
    st.session_state["pockets"] = loaded
    st.session_state["import_warnings"] = list(check.warnings)
    # drop widget state so the inputs pick up the imported values
    for k in list(st.session_state.keys()):
        if str(k).endswith(("_initial", "_monthly", "_rate")):
            del st.session_state[k]
    st.rerun()


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
def render() -> None:
    configure_logging(logging.INFO)
    st.set_page_config(page_title="Finances & Patrimoine", layout="wide")
    _init_state()

    feed = _price_feed()
    price = feed.refresh()
    st.session_state["shown_price"] = price

    head_l, head_r = st.columns([4, 1])
    with head_l:
        st.title("Tableau de bord – Finances & Patrimoine")
    with head_r:
        st.metric("BTC", fmt_eur(price))
        if st.button("Rafraîchir", use_container_width=True):
            feed.refresh(force=True)
            st.rerun()
        if feed.last_error is not None:
            st.caption(f"Prix indisponible ({feed.last_error.code})")
        _price_ticker(feed)

    with st.sidebar:
        _import_sidebar()

    left, right = st.columns([7, 5])
    with left:
        st.subheader("Mes poches")
        pockets = _pocket_inputs(st.session_state["pockets"], price)
        st.session_state["pockets"] = pockets

    check = validate_pockets(pockets)
    for w in check.warnings:
        st.sidebar.warning(w)
    if not check.is_valid:
        for e in check.errors:
            st.error(e)
        st.stop()

    holdings = (
        ExternalHolding(EXTERNAL_HOLDING_POCKET, st.session_state["btc_quantity"]),
    ) if EXTERNAL_HOLDING_POCKET in pockets else ()

    with right:
        st.subheader("Paramètres")
        auto_rate = st.toggle("Taux de rendement automatique", value=True)
        manual_pct = 6.0
        if not auto_rate:
            manual_pct = st.number_input(
                "Taux manuel (global, %)", value=6.0, step=STEP_MANUAL_RATE_PCT, format="%.2f"
            )
        years = st.radio(
            "Horizon", HORIZON_CHOICES, index=len(HORIZON_CHOICES) - 1,
            horizontal=True, format_func=lambda y: f"{y} ans",
        )
        inflation_pct = st.number_input(
            "Inflation annuelle (%)", value=0.0, step=0.25, format="%.2f"
        )

        cfg = ProjectionConfig(
            as_of_date=pd.Timestamp.today().normalize(),
            years=int(years),
            inflation_rate=inflation_pct / 100.0,
            rate_mode="auto" if auto_rate else "manual",
            manual_rate=manual_pct / 100.0,
        )
        try:
            result = run_projection(pockets, cfg, holdings=holdings, price=price)
        except ValueError as e:
            st.error(f"Projection failed: {e}")
            st.stop()

        st.text_input("Solde initial (total)", fmt_eur(result.total_initial), disabled=True)
        st.text_input("Apport mensuel (total)", fmt_eur(result.total_monthly), disabled=True)
        rate_label = "Taux (pondéré par l'allocation)" if auto_rate else "Taux global"
        st.text_input(rate_label, fmt_pct(result.global_rate), disabled=True)

    chart_l, chart_r = st.columns([7, 5])
    with chart_l:
        st.subheader("Projection")
        _plot_projection(result)
    with chart_r:
        st.subheader("Allocation")
        _plot_allocation(result)

    _kpi_row(result)

    with st.expander("Projection table", expanded=False):
        st.dataframe(result.series.to_frame(), use_container_width=True, hide_index=True)


def main() -> None:
    """Console entry point: launch this page with `streamlit run`."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(Path(__file__).resolve())]
    sys.exit(stcli.main())


if __name__ == "__main__":
    if runtime.exists():
        render()
    else:
        main()
