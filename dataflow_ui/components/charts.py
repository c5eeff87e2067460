"""
Chart Components for DataFlow Analytics
Plotly figures for the dashboard, analytics and reports pages
"""

import plotly.graph_objects as go
import pandas as pd
from typing import Dict, List, Sequence


class ChartBuilder:
    """Build the dashboard's line/area/bar/pie charts"""

    # Series colors, cycled for pie slices
    PALETTE = ['#3B82F6', '#10B981', '#8B5CF6', '#EF4444', '#F59E0B', '#06B6D4']

    COLORS = {
        'bg': '#ffffff',
        'paper': '#ffffff',
        'grid': '#e5e7eb',
        'text': '#111827',
        'text_muted': '#6b7280',
    }

    KINDS = ('line', 'area', 'bar', 'pie')

    @staticmethod
    def get_layout_template() -> dict:
        """Get consistent layout template for all charts"""
        return {
            'paper_bgcolor': ChartBuilder.COLORS['paper'],
            'plot_bgcolor': ChartBuilder.COLORS['bg'],
            'font': {
                'family': 'Inter, -apple-system, sans-serif',
                'color': ChartBuilder.COLORS['text'],
                'size': 11
            },
            'margin': {'l': 50, 'r': 20, 't': 50, 'b': 40},
            'xaxis': {
                'gridcolor': ChartBuilder.COLORS['grid'],
                'tickfont': {'size': 10, 'color': ChartBuilder.COLORS['text_muted']},
                'showgrid': False,
            },
            'yaxis': {
                'gridcolor': ChartBuilder.COLORS['grid'],
                'zerolinecolor': ChartBuilder.COLORS['grid'],
                'tickfont': {'size': 10, 'color': ChartBuilder.COLORS['text_muted']},
                'showgrid': True,
                'griddash': 'dash',
            },
            'showlegend': False,
            'hovermode': 'x unified',
            'hoverlabel': {
                'bgcolor': ChartBuilder.COLORS['paper'],
                'bordercolor': ChartBuilder.COLORS['grid'],
            }
        }

    @staticmethod
    def to_frame(points: Sequence[Dict]) -> pd.DataFrame:
        return pd.DataFrame(list(points))

    @staticmethod
    def create_chart(
        points: Sequence[Dict],
        kind: str,
        y: str,
        x: str = 'name',
        title: str = '',
        color: str = '#3B82F6',
        height: int = 300
    ) -> go.Figure:
        """
        One series of `points[*][y]` against `points[*][x]`.

        For 'pie', x holds the slice labels and y the slice sizes.
        """
        if kind not in ChartBuilder.KINDS:
            raise ValueError(f"Unknown chart kind '{kind}', expected one of {ChartBuilder.KINDS}")

        df = ChartBuilder.to_frame(points)
        fig = go.Figure()

        if df.empty or y not in df.columns or x not in df.columns:
            fig.add_annotation(
                text="No data", showarrow=False,
                font={'size': 12, 'color': ChartBuilder.COLORS['text_muted']}
            )
        elif kind == 'pie':
            fig.add_trace(go.Pie(
                labels=df[x],
                values=df[y],
                hole=0,
                marker={'colors': [ChartBuilder.PALETTE[i % len(ChartBuilder.PALETTE)] for i in range(len(df))]},
                textinfo='label+percent',
            ))
        elif kind == 'bar':
            fig.add_trace(go.Bar(
                x=df[x], y=df[y],
                marker={'color': color},
                name=y,
            ))
        else:
            fig.add_trace(go.Scatter(
                x=df[x], y=df[y],
                mode='lines+markers',
                line={'color': color, 'width': 3},
                marker={'color': color, 'size': 6},
                fill='tozeroy' if kind == 'area' else None,
                fillcolor=f"{color}4D" if kind == 'area' else None,
                name=y,
            ))

        layout = ChartBuilder.get_layout_template()
        layout['height'] = height
        layout['title'] = {'text': title, 'x': 0.02, 'font': {'size': 14}}
        if kind == 'pie':
            layout['showlegend'] = True
            layout.pop('hovermode')

        fig.update_layout(**layout)
        return fig

    @staticmethod
    def create_multi_line_chart(
        points: Sequence[Dict],
        x: str,
        series: List[str],
        title: str = '',
        height: int = 300
    ) -> go.Figure:
        """Several series sharing one x axis (e.g. active vs new users)"""
        df = ChartBuilder.to_frame(points)
        fig = go.Figure()

        for i, name in enumerate(series):
            if name not in df.columns:
                continue
            color = ChartBuilder.PALETTE[i % len(ChartBuilder.PALETTE)]
            fig.add_trace(go.Scatter(
                x=df[x], y=df[name],
                mode='lines',
                line={'color': color, 'width': 2},
                name=name.replace('_', ' ').title(),
            ))

        layout = ChartBuilder.get_layout_template()
        layout['height'] = height
        layout['title'] = {'text': title, 'x': 0.02, 'font': {'size': 14}}
        layout['showlegend'] = True
        layout['legend'] = {'orientation': 'h', 'yanchor': 'bottom', 'y': 1.02, 'xanchor': 'right', 'x': 1}

        fig.update_layout(**layout)
        return fig
