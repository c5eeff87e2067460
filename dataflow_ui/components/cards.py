"""
Card Components for DataFlow Analytics
KPI tiles and summary panels rendered as HTML
"""

import streamlit as st
from typing import List, Optional, Sequence, Tuple

from ..models import RealtimeMetric
from ..utils.transforms import format_realtime_value


class CardBuilder:
    """Build dashboard cards"""

    @staticmethod
    def render_metric_card(title: str, value: str, color: str, change: Optional[float] = None) -> None:
        """Single KPI tile; `change` renders as a signed percentage"""

        change_html = ""
        if change is not None:
            up = change >= 0
            change_color = "#10b981" if up else "#ef4444"
            arrow = "▲" if up else "▼"
            change_html = f"""
            <div style="font-size: 12px; font-weight: 500; color: {change_color};">
                {arrow} {abs(change):.1f}%
            </div>
            """

        st.markdown(f"""
        <div style="background: #ffffff; border: 1px solid #f3f4f6; border-radius: 12px; padding: 20px; box-shadow: 0 4px 12px rgba(0,0,0,0.06);">
            <div style="display: flex; align-items: center; gap: 8px; margin-bottom: 8px;">
                <div style="width: 10px; height: 10px; background: {color}; border-radius: 50%;"></div>
                <span style="font-size: 13px; font-weight: 500; color: #4b5563;">{title}</span>
            </div>
            <div style="font-size: 24px; font-weight: 700; color: #111827; margin-bottom: 4px;">{value}</div>
            {change_html}
        </div>
        """, unsafe_allow_html=True)

    @staticmethod
    def render_realtime_cards(metrics: Sequence[RealtimeMetric]) -> None:
        if not metrics:
            return
        cols = st.columns(len(metrics))
        for col, metric in zip(cols, metrics):
            with col:
                CardBuilder.render_metric_card(
                    metric.name,
                    format_realtime_value(metric),
                    metric.color,
                    metric.change,
                )

    @staticmethod
    def render_stat_tile(label: str, value: str, gradient: Tuple[str, str]) -> None:
        """Solid gradient tile for the quick-stats row"""
        start, end = gradient
        st.markdown(f"""
        <div style="background: linear-gradient(90deg, {start} 0%, {end} 100%); border-radius: 12px; padding: 20px; color: #ffffff;">
            <div style="font-size: 13px; opacity: 0.8;">{label}</div>
            <div style="font-size: 24px; font-weight: 700;">{value}</div>
        </div>
        """, unsafe_allow_html=True)

    @staticmethod
    def render_summary_panel(title: str, rows: List[Tuple[str, str, str]]) -> None:
        """
        Titled list of label/value rows.

        rows: (label, value, value_color)
        """
        body = "".join(
            f"""
            <div style="display: flex; justify-content: space-between; padding: 6px 0;">
                <span style="color: #4b5563;">{label}</span>
                <span style="font-weight: 600; color: {color};">{value}</span>
            </div>
            """
            for label, value, color in rows
        )

        st.markdown(f"""
        <div style="background: #ffffff; border: 1px solid #f3f4f6; border-radius: 12px; padding: 20px; box-shadow: 0 4px 12px rgba(0,0,0,0.06);">
            <div style="font-size: 16px; font-weight: 600; color: #111827; margin-bottom: 12px;">{title}</div>
            {body}
        </div>
        """, unsafe_allow_html=True)
