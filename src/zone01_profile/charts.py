"""
SVG chart renderers for the Zone01 Profile dashboard.

PURPOSE: Turn XP transactions and audit stats into self-contained SVG markup.
AI CONTEXT: Pure functions - no I/O. Output is embedded verbatim by the web
pages, served by the chart endpoints and written by 'zone01-profile export'.

CHARTS:
1. XP timeline: cumulative XP line with gradient area, 900x500 canvas
2. Audit ratio: two-wedge donut with centred ratio and legend, 450x450 canvas

COORDINATE MAPPING (timeline):
    x = pad + (t - t_min) / (t_max - t_min) * plot_width
    y = height - pad - value / max_value * plot_height
    t_max == t_min  -> every point at the horizontal centre
    max_value <= 0  -> every point on the baseline

WEDGE GEOMETRY (donut):
    Angles start at 12 o'clock (-pi/2) and run clockwise.
    Path: M centre L start A r r 0 <large-arc> 1 end Z
    A full-turn wedge is drawn as two half arcs.

Empty input renders a placeholder paragraph instead of an SVG.

USAGE:
    markup = render_xp_timeline(data.xp_timeline)
    donut = render_audit_ratio(data.audit)
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from .config import Config
from .models import AuditStats, XPTransaction
from .statistics import StatisticsEngine

__all__ = [
    "TIMELINE_PLACEHOLDER",
    "AUDIT_PLACEHOLDER",
    "Wedge",
    "format_value",
    "format_amount",
    "cumulative_points",
    "render_xp_timeline",
    "proportion_wedges",
    "wedge_path",
    "render_audit_ratio",
    "placeholder_svg",
]

TIMELINE_PLACEHOLDER = '<p class="loading-text">No XP data available</p>'
AUDIT_PLACEHOLDER = '<p class="loading-text">No audit data available</p>'

_SVG_NS = "http://www.w3.org/2000/svg"
_START_ANGLE = -math.pi / 2
_FULL_TURN = 2 * math.pi

DONE_COLOR = "#4ade80"
RECEIVED_COLOR = "#60d0ff"
WEDGE_STROKE = "#2d3250"
HOLE_COLOR = "#1a1d2e"
LABEL_COLOR = "#e0e4f0"
MUTED_COLOR = "#a8b0c8"

_engine = StatisticsEngine()


def _num(value: float) -> str:
    """Compact coordinate text: at most two decimals, no trailing zeros."""
    return f"{round(value, 2) + 0.0:g}"


def format_value(value: float) -> str:
    """
    Abbreviate a number for axis labels and tooltips.

    Args:
        value: Non-negative amount.

    Returns:
        'X.XM' at or above one million, 'X.Xk' at or above one thousand,
        otherwise the rounded integer. Thresholds apply to the displayed
        value, so 999.6 reads '1.0k' and never '1000'.

    Example:
        >>> format_value(999), format_value(1500), format_value(2_500_000)
        ('999', '1.5k', '2.5M')
    """
    if round(value) < 1_000:
        return str(int(round(value)))
    if round(value / 1_000, 1) < 1_000:
        return f"{value / 1_000:.1f}k"
    return f"{value / 1_000_000:.1f}M"


def format_amount(value: float) -> str:
    """
    Format audit weight with a byte-like suffix.

    Example:
        >>> format_amount(1500)
        '1.5kB'
    """
    return f"{format_value(value)}B"


def cumulative_points(
    transactions: Sequence[XPTransaction],
) -> list[tuple[datetime, int]]:
    """
    Running XP total per transaction.

    Args:
        transactions: XP transactions in ascending time order.

    Returns:
        (timestamp, cumulative XP) pairs; the last value is the sum.

    Example:
        >>> [v for _, v in cumulative_points(txs)]  # amounts 10, 20, 30
        [10, 30, 60]
    """
    return _engine.cumulative_series(transactions)


@dataclass(frozen=True)
class _TimelineScale:
    """Maps (timestamp, value) pairs onto the timeline canvas."""

    t_min: datetime
    t_max: datetime
    max_value: float
    width: int = Config.TIMELINE_WIDTH
    height: int = Config.TIMELINE_HEIGHT
    padding: int = Config.TIMELINE_PADDING

    @property
    def plot_width(self) -> int:
        return self.width - 2 * self.padding

    @property
    def plot_height(self) -> int:
        return self.height - 2 * self.padding

    @property
    def baseline(self) -> int:
        return self.height - self.padding

    def x(self, t: datetime) -> float:
        span = (self.t_max - self.t_min).total_seconds()
        if span <= 0:
            return self.padding + self.plot_width / 2
        return self.padding + (t - self.t_min).total_seconds() / span * self.plot_width

    def y(self, value: float) -> float:
        if self.max_value <= 0:
            return float(self.baseline)
        return self.baseline - value / self.max_value * self.plot_height


def render_xp_timeline(transactions: Sequence[XPTransaction]) -> str:
    """
    Render cumulative XP over time as an SVG line/area chart.

    Business context: The timeline shows how steadily a student has
    progressed through the current event. Each dot is one XP gain with a
    tooltip showing the date and running total.

    Args:
        transactions: XP transactions in ascending time order.

    Returns:
        SVG markup, or TIMELINE_PLACEHOLDER when there are no transactions.

    Example:
        >>> render_xp_timeline([])
        '<p class="loading-text">No XP data available</p>'
    """
    if not transactions:
        return TIMELINE_PLACEHOLDER

    points = cumulative_points(transactions)
    scale = _TimelineScale(
        t_min=points[0][0],
        t_max=points[-1][0],
        max_value=max(value for _, value in points),
    )
    width, height, pad = scale.width, scale.height, scale.padding
    baseline = scale.baseline

    coords = [(scale.x(t), scale.y(v)) for t, v in points]
    line_path = " L ".join(f"{_num(x)} {_num(y)}" for x, y in coords)
    area_path = (
        f"M {pad} {baseline} L {line_path} "
        f"L {_num(coords[-1][0])} {baseline} Z"
    )

    grid_labels = []
    for fraction in Config.TIMELINE_GRID_FRACTIONS:
        y = baseline - fraction * scale.plot_height
        grid_labels.append(
            f'<text x="{pad - 15}" y="{_num(y + 6)}" text-anchor="end" '
            f'style="fill: {LABEL_COLOR}; font-size: 16px; font-weight: 500;">'
            f"{format_value(scale.max_value * fraction)}</text>"
            f'<line x1="{pad - 8}" y1="{_num(y)}" x2="{pad}" y2="{_num(y)}" class="graph-axis" />'
        )

    dots = []
    for (t, value), (x, y) in zip(points, coords, strict=True):
        dots.append(
            f'<circle cx="{_num(x)}" cy="{_num(y)}" r="5" class="graph-dot">'
            f"<title>{t.strftime('%Y-%m-%d')}: {format_value(value)} XP</title></circle>"
        )

    return f"""<svg viewBox="0 0 {width} {height}" xmlns="{_SVG_NS}" style="width: 100%; height: auto;">
<text x="{_num(width / 2)}" y="40" text-anchor="middle" style="fill: #ffffff; font-size: 22px; font-weight: 600;">XP Progress Over Time</text>
<defs>
<linearGradient id="areaGradient" x1="0%" y1="0%" x2="0%" y2="100%">
<stop offset="0%" style="stop-color:{DONE_COLOR};stop-opacity:0.6" />
<stop offset="100%" style="stop-color:{DONE_COLOR};stop-opacity:0.1" />
</linearGradient>
</defs>
<line x1="{pad}" y1="{pad + 30}" x2="{pad}" y2="{baseline}" class="graph-axis" />
<line x1="{pad}" y1="{baseline}" x2="{width - pad}" y2="{baseline}" class="graph-axis" />
{"".join(grid_labels)}
<path d="{area_path}" class="graph-area" fill="url(#areaGradient)" />
<path d="M {line_path}" class="graph-line" fill="none" />
{"".join(dots)}
<text x="{_num(width / 2)}" y="{height - 15}" text-anchor="middle" style="fill: {LABEL_COLOR}; font-size: 16px; font-weight: 500;">Time</text>
<text x="25" y="{_num(height / 2)}" text-anchor="middle" transform="rotate(-90, 25, {_num(height / 2)})" style="fill: {LABEL_COLOR}; font-size: 16px; font-weight: 500;">Total XP</text>
</svg>"""


@dataclass(frozen=True)
class Wedge:
    """
    One slice of the proportion chart.

    Angles are in radians, measured clockwise in SVG coordinates with
    12 o'clock at -pi/2.
    """

    label: str
    value: float
    percent: float
    start_angle: float
    end_angle: float

    @property
    def span(self) -> float:
        """Angular size in radians."""
        return self.end_angle - self.start_angle

    @property
    def span_degrees(self) -> float:
        """Angular size in degrees."""
        return math.degrees(self.span)

    @property
    def large_arc(self) -> bool:
        """True when the wedge spans more than half a turn."""
        return self.span > math.pi

    @property
    def is_full_turn(self) -> bool:
        """True when the wedge covers the whole circle."""
        return math.isclose(self.span, _FULL_TURN)


def proportion_wedges(done: float, received: float) -> list[Wedge]:
    """
    Split a full turn between audit weight done and received.

    Business context: The donut compares how much auditing a student has
    given with how much they have received. The first wedge starts at
    12 o'clock and the second continues clockwise from where it ends.

    Args:
        done: Audit weight given (totalUp).
        received: Audit weight received (totalDown).

    Returns:
        [done wedge, received wedge], or [] when both are zero.

    Example:
        >>> [round(w.span_degrees) for w in proportion_wedges(3, 1)]
        [270, 90]
    """
    if done + received <= 0:
        return []
    done_pct, received_pct = _engine.share_percentages(done, received)
    done_end = _START_ANGLE + done_pct / 100 * _FULL_TURN
    received_end = done_end + received_pct / 100 * _FULL_TURN
    return [
        Wedge("Done", done, done_pct, _START_ANGLE, done_end),
        Wedge("Received", received, received_pct, done_end, received_end),
    ]


def wedge_path(wedge: Wedge, cx: float, cy: float, radius: float) -> str:
    """
    SVG path data for a wedge.

    A full-turn wedge becomes a closed circle made of two half arcs,
    because an arc whose end point equals its start point draws nothing.

    Args:
        wedge: Wedge to draw.
        cx: Centre x.
        cy: Centre y.
        radius: Outer radius.

    Returns:
        Path 'd' attribute value.
    """
    r = _num(radius)
    if wedge.is_full_turn:
        top = f"{_num(cx)} {_num(cy - radius)}"
        bottom = f"{_num(cx)} {_num(cy + radius)}"
        return f"M {top} A {r} {r} 0 1 1 {bottom} A {r} {r} 0 1 1 {top} Z"

    sx = cx + radius * math.cos(wedge.start_angle)
    sy = cy + radius * math.sin(wedge.start_angle)
    ex = cx + radius * math.cos(wedge.end_angle)
    ey = cy + radius * math.sin(wedge.end_angle)
    flag = 1 if wedge.large_arc else 0
    return (
        f"M {_num(cx)} {_num(cy)} L {_num(sx)} {_num(sy)} "
        f"A {r} {r} 0 {flag} 1 {_num(ex)} {_num(ey)} Z"
    )


def render_audit_ratio(audit: AuditStats) -> str:
    """
    Render the audit ratio as an SVG donut with legend.

    Args:
        audit: Ratio plus done/received audit weight.

    Returns:
        SVG markup, or AUDIT_PLACEHOLDER when done and received are both 0.

    Example:
        >>> render_audit_ratio(AuditStats())
        '<p class="loading-text">No audit data available</p>'
    """
    wedges = proportion_wedges(audit.done, audit.received)
    if not wedges:
        return AUDIT_PLACEHOLDER

    size = Config.DONUT_SIZE
    cx = size / 2
    cy = Config.DONUT_CENTER_Y
    done, received = wedges

    return f"""<svg viewBox="0 0 {size} {size}" xmlns="{_SVG_NS}" style="width: 100%; height: auto;">
<text x="{_num(cx)}" y="30" text-anchor="middle" style="fill: #ffffff; font-size: 18px; font-weight: 600;">Audit Ratio</text>
<path d="{wedge_path(done, cx, cy, Config.DONUT_RADIUS)}" fill="{DONE_COLOR}" stroke="{WEDGE_STROKE}" stroke-width="2"><title>Audits Done: {format_amount(done.value)}</title></path>
<path d="{wedge_path(received, cx, cy, Config.DONUT_RADIUS)}" fill="{RECEIVED_COLOR}" stroke="{WEDGE_STROKE}" stroke-width="2"><title>Audits Received: {format_amount(received.value)}</title></path>
<circle cx="{_num(cx)}" cy="{cy}" r="{Config.DONUT_HOLE_RADIUS}" fill="{HOLE_COLOR}" />
<text x="{_num(cx)}" y="{cy - 12}" text-anchor="middle" style="font-size: 13px; fill: {MUTED_COLOR}; text-transform: uppercase; letter-spacing: 1px;">RATIO</text>
<text x="{_num(cx)}" y="{cy + 18}" text-anchor="middle" style="font-size: 38px; font-weight: 700; fill: {DONE_COLOR};">{audit.ratio:.2f}</text>
<g transform="translate({_num(cx - 110)}, {cy + 140})">
<circle cx="10" cy="10" r="6" fill="{DONE_COLOR}" />
<text x="25" y="15" style="font-size: 13px; fill: {LABEL_COLOR}; font-weight: 500;">Done: {format_amount(done.value)} <tspan fill="{MUTED_COLOR}">({done.percent:.1f}%)</tspan></text>
<circle cx="10" cy="35" r="6" fill="{RECEIVED_COLOR}" />
<text x="25" y="40" style="font-size: 13px; fill: {LABEL_COLOR}; font-weight: 500;">Received: {format_amount(received.value)} <tspan fill="{MUTED_COLOR}">({received.percent:.1f}%)</tspan></text>
</g>
</svg>"""


def placeholder_svg(message: str, width: int = 400, height: int = 60) -> str:
    """
    Standalone SVG carrying a short notice.

    Used by the chart endpoints, which must always answer with an image
    even when there is nothing to plot.

    Example:
        >>> placeholder_svg("No XP data available").startswith("<svg")
        True
    """
    return (
        f'<svg viewBox="0 0 {width} {height}" xmlns="{_SVG_NS}" '
        f'width="{width}" height="{height}">'
        f'<text x="{width // 2}" y="{height // 2}" text-anchor="middle" '
        f'dominant-baseline="middle" style="fill: {MUTED_COLOR}; font-size: 16px;">'
        f"{message}</text></svg>"
    )
