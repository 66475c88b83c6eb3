from __future__ import annotations
"""Plotly rendering of sampled series.

One line per field of value against distance along the pipe, plus an optional
3D view of the centerline coloured by the first field.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .centerline import Centerline
from .curve_sampler import SampleSeries


@dataclass
class PlotConfig:
    title: str = "Average along curve"
    template: str = "plotly_white"
    show_markers: bool = True
    show_centerline_3d: bool = True
    colorscale: str = "Viridis"

    colors: Dict[str, str] = field(default_factory=lambda: {
        'centerline': 'black',
    })


class SeriesPlotter:
    def __init__(self, series: Sequence[SampleSeries], *, config: PlotConfig | None = None):
        self.series = [s for s in series if len(s)]
        self.cfg = config or PlotConfig()

    # ---------------- helpers ----------------
    @staticmethod
    def distance(series: SampleSeries) -> np.ndarray:
        return Centerline(series.origins).arc_length()

    # ---------------- traces builders ----------------
    def build_series_traces(self, traces: List):
        mode = 'lines+markers' if self.cfg.show_markers else 'lines'
        for s in self.series:
            d = self.distance(s)
            P = s.origins
            # customdata: [index, x, y, z]
            cdat = [[i, float(p[0]), float(p[1]), float(p[2])] for i, p in enumerate(P)]
            traces.append(go.Scatter(
                x=d, y=s.values,
                mode=mode,
                name=s.field_name,
                meta=s.field_name,
                customdata=cdat,
                hovertemplate=(
                    '<b>%{meta}</b><br>'
                    'Station: %{customdata[0]}<br>'
                    'Distance: %{x:.4f} m<br>'
                    'Value: %{y:.6g}<br>'
                    'X: %{customdata[1]:.4f} m<br>'
                    'Y: %{customdata[2]:.4f} m<br>'
                    'Z: %{customdata[3]:.4f} m<extra></extra>'
                ),
            ))

    def build_centerline_trace(self) -> Optional[go.Scatter3d]:
        if not self.series:
            return None
        s = self.series[0]
        P = s.origins
        return go.Scatter3d(
            x=P[:, 0], y=P[:, 1], z=P[:, 2],
            mode='lines+markers',
            line=dict(color=self.cfg.colors['centerline'], width=3),
            marker=dict(size=4, color=s.values, colorscale=self.cfg.colorscale,
                        colorbar=dict(title=s.field_name, x=1.02)),
            name=f'Centerline ({s.field_name})',
            showlegend=False,
        )

    # ---------------- figure ----------------
    def figure(self) -> go.Figure:
        traces: List = []
        self.build_series_traces(traces)
        centerline = self.build_centerline_trace() if self.cfg.show_centerline_3d else None

        if centerline is None:
            fig = go.Figure(traces)
            fig.update_xaxes(title_text='Distance along centerline (m)')
            fig.update_yaxes(title_text='Area average')
        else:
            fig = make_subplots(rows=1, cols=2, column_widths=[0.55, 0.45],
                                specs=[[{"type": "xy"}, {"type": "scene"}]])
            for t in traces:
                fig.add_trace(t, row=1, col=1)
            fig.add_trace(centerline, row=1, col=2)
            fig.update_xaxes(title_text='Distance along centerline (m)', row=1, col=1)
            fig.update_yaxes(title_text='Area average', row=1, col=1)
            fig.update_scenes(xaxis_title='X (m)', yaxis_title='Y (m)', zaxis_title='Z (m)',
                              aspectmode='data')

        fig.update_layout(title=self.cfg.title, template=self.cfg.template,
                          margin=dict(l=40, r=40, t=60, b=40))
        return fig

    def write_html(self, path) -> Path:
        p = Path(path)
        self.figure().write_html(str(p), include_plotlyjs="cdn")
        return p
