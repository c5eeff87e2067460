"""
Realtime Freshness Indicator
Shows how old the last realtime snapshot is, with color coding.
"""

import streamlit as st

from ..models import DataFreshness, FreshnessLevel


def render_freshness_badge(freshness: DataFreshness, compact: bool = False) -> None:
    """
    Color coding:
    - Green: < 10 seconds (LIVE)
    - Yellow: 10-30 seconds (DELAYED)
    - Red: > 30 seconds (STALE)
    - Gray: no snapshot yet (OFFLINE)
    """

    color = freshness.level.color
    label = freshness.level.label

    # Pulse animation for fresh data
    animation = "animation: pulse 1.5s infinite;" if freshness.level == FreshnessLevel.FRESH else ""

    if compact:
        st.markdown(f"""
        <div style="display: inline-flex; align-items: center; gap: 6px; padding: 4px 10px; background: {color}22; border: 1px solid {color}44; border-radius: 12px;">
            <div style="width: 6px; height: 6px; background: {color}; border-radius: 50%; {animation}"></div>
            <span style="font-size: 10px; color: {color}; font-weight: 600;">{label}</span>
        </div>
        """, unsafe_allow_html=True)
        return

    last_update = freshness.last_update.strftime('%H:%M:%S') if freshness.last_update else ""

    st.markdown(f"""
    <div style="display: flex; align-items: center; justify-content: space-between; padding: 8px 12px; background: {color}15; border: 1px solid {color}30; border-radius: 10px;">
        <div style="display: flex; align-items: center; gap: 8px;">
            <div style="width: 8px; height: 8px; background: {color}; border-radius: 50%; box-shadow: 0 0 8px {color}; {animation}"></div>
            <span style="font-size: 11px; color: {color}; font-weight: 600;">{label}</span>
        </div>
        <div style="text-align: right;">
            <div style="font-size: 12px; color: #111827;">{freshness.display}</div>
            <div style="font-size: 10px; color: #64748b;">{last_update}</div>
        </div>
    </div>
    """, unsafe_allow_html=True)
