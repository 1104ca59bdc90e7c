import json
import math
from datetime import date
from html import escape

from quickdrop.dashboard.poller import DashboardState
from quickdrop.schemas.dashboard import DashboardOverview
from quickdrop.schemas.transfer_event import TransferEvent
from quickdrop.services.aggregator import format_file_size, performance

RECENT_ROWS = 10
REFRESH_SECONDS = 5

PALETTE = [
    (255, 99, 132),
    (54, 162, 235),
    (255, 206, 86),
    (75, 192, 192),
    (153, 102, 255),
    (255, 159, 64),
]
BLUE = (54, 162, 235)
GREEN = (75, 192, 192)
RED = (255, 99, 132)

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="{refresh}">
<title>QuickDrop Dashboard</title>
<script src="https://cdn.jsdelivr.net/npm/chart.js"></script>
<style>
body {{ font-family: system-ui, sans-serif; margin: 2rem; color: #111; }}
.cards {{ display: grid; grid-template-columns: repeat(4, 1fr); gap: 1rem; }}
.card {{ border: 1px solid #ddd; border-radius: 8px; padding: 1rem; }}
.card .value {{ font-size: 1.5rem; font-weight: bold; }}
.muted {{ color: #666; font-size: 0.8rem; }}
.bar {{ height: 8px; background: #eee; border-radius: 4px; overflow: hidden; }}
.bar div {{ height: 100%; background: #111; }}
table {{ width: 100%; border-collapse: collapse; }}
th, td {{ text-align: left; padding: 0.4rem; border-bottom: 1px solid #eee; }}
.ok {{ color: #166534; }} .fail {{ color: #b91c1c; }}
.charts {{ display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; }}
.chart {{ height: 300px; }} .wide {{ grid-column: span 2; }}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def rgba(color: tuple[int, int, int], alpha: float) -> str:
    return "rgba({}, {}, {}, {})".format(*color, alpha)


def file_type_chart(overview: DashboardOverview) -> dict:
    colors = [PALETTE[i % len(PALETTE)] for i in range(len(overview.file_types))]
    return {
        "type": "pie",
        "data": {
            "labels": list(overview.file_types),
            "datasets": [
                {
                    "data": list(overview.file_types.values()),
                    "backgroundColor": [rgba(c, 0.7) for c in colors],
                    "borderColor": [rgba(c, 1) for c in colors],
                    "borderWidth": 1,
                }
            ],
        },
        "options": {"maintainAspectRatio": False},
    }


def time_chart(overview: DashboardOverview) -> dict:
    return {
        "type": "line",
        "data": {
            "labels": list(overview.transfers_per_day),
            "datasets": [
                {
                    "label": "Transfers",
                    "data": list(overview.transfers_per_day.values()),
                    "borderColor": rgba(BLUE, 1),
                    "backgroundColor": rgba(BLUE, 0.2),
                    "tension": 0.3,
                    "fill": True,
                }
            ],
        },
        "options": {"maintainAspectRatio": False, "scales": {"y": {"beginAtZero": True}}},
    }


def outcome_chart(overview: DashboardOverview) -> dict:
    days = overview.outcomes_per_day
    return {
        "type": "bar",
        "data": {
            "labels": [day.date for day in days],
            "datasets": [
                {
                    "label": "Successful",
                    "data": [day.successful for day in days],
                    "backgroundColor": rgba(GREEN, 0.7),
                    "borderColor": rgba(GREEN, 1),
                    "borderWidth": 1,
                },
                {
                    "label": "Failed",
                    "data": [day.failed for day in days],
                    "backgroundColor": rgba(RED, 0.7),
                    "borderColor": rgba(RED, 1),
                    "borderWidth": 1,
                },
            ],
        },
        "options": {
            "maintainAspectRatio": False,
            "scales": {"y": {"beginAtZero": True}, "x": {"stacked": False}},
        },
    }


def chart_configs(overview: DashboardOverview) -> dict[str, dict]:
    return {
        "file-types": file_type_chart(overview),
        "over-time": time_chart(overview),
        "outcomes": outcome_chart(overview),
    }


def render_card(title: str, value: str, extra: str = "") -> str:
    return (
        f'<div class="card"><div class="muted">{escape(title)}</div>'
        f'<div class="value">{escape(value)}</div>{extra}</div>'
    )


def render_cards(overview: DashboardOverview) -> str:
    summary = overview.summary
    rate_bar = f'<div class="bar"><div style="width: {summary.success_rate}%"></div></div>'
    return '<section class="cards">{}</section>'.format(
        "".join(
            [
                render_card("Total transfers", str(summary.total_transfers)),
                render_card("Total size", format_file_size(summary.total_size)),
                render_card("Success rate", f"{summary.success_rate:.1f}%", rate_bar),
                render_card(
                    "Most active device",
                    summary.most_active_device,
                    f'<div class="muted">{summary.most_active_count} transfers</div>',
                ),
            ]
        )
    )


def render_row(event: TransferEvent) -> str:
    status = (
        '<span class="ok">Successful</span>'
        if event.successful
        else '<span class="fail">Failed</span>'
    )
    return (
        "<tr>"
        f"<td>{escape(event.timestamp.strftime('%Y-%m-%d %H:%M:%S'))}</td>"
        f"<td>{escape(event.sender_name)}<div class=\"muted\">{escape(event.sender_ip)}</div></td>"
        f"<td>{escape(event.receiver_name)}<div class=\"muted\">{escape(event.receiver_ip)}</div></td>"
        f"<td>{escape(event.file_name)}<div class=\"muted\">{escape(event.file_type)}</div></td>"
        f"<td>{escape(format_file_size(event.file_size))}</td>"
        f"<td>{status}</td>"
        "</tr>"
    )


def render_table(events: list[TransferEvent]) -> str:
    rows = "".join(render_row(event) for event in events[:RECENT_ROWS])
    return (
        f"<section><h2>Recent transfers</h2>"
        f'<p class="muted">Showing the latest {len(events)} transfers (auto-refresh)</p>'
        "<table><thead><tr><th>Time</th><th>Sender</th><th>Receiver</th>"
        "<th>File</th><th>Size</th><th>Status</th></tr></thead>"
        f"<tbody>{rows}</tbody></table></section>"
    )


def render_charts(overview: DashboardOverview) -> str:
    configs = chart_configs(overview)
    canvases = "".join(
        f'<div class="card chart{" wide" if name == "outcomes" else ""}">'
        f'<canvas id="{name}"></canvas></div>'
        for name in configs
    )
    # "</" must not terminate the inline script early.
    payload = json.dumps(configs).replace("</", "<\\/")
    script = (
        f"<script>const charts = {payload};"
        "for (const [id, config] of Object.entries(charts)) {"
        "new Chart(document.getElementById(id), config); }</script>"
    )
    return f'<section><h2>Charts</h2><div class="charts">{canvases}</div>{script}</section>'


def render_performance(events: list[TransferEvent], today: date | None = None) -> str:
    stats = performance(events, today)
    items = [
        ("Average file size", format_file_size(stats.average_size)),
        ("Largest transfer", format_file_size(stats.largest_transfer)),
        ("Transfers today", str(stats.today_count)),
    ]
    rows = "".join(
        f"<tr><td>{escape(label)}</td><td>{escape(value)}</td></tr>" for label, value in items
    )
    return f"<section><h2>Performance</h2><table><tbody>{rows}</tbody></table></section>"


def render_loading() -> str:
    return PAGE.format(refresh=1, body="<p>Loading dashboard data...</p>")


def refresh_seconds(interval: float) -> int:
    return max(1, math.ceil(interval))


def render_error(message: str, refresh: int = REFRESH_SECONDS) -> str:
    body = (
        "<h2>Connection error</h2>"
        f"<p>{escape(message)}</p>"
        '<form method="post" action="/retry"><button type="submit">Retry</button></form>'
    )
    return PAGE.format(refresh=refresh, body=body)


def render_dashboard(
    state: DashboardState,
    today: date | None = None,
    refresh: int = REFRESH_SECONDS,
) -> str:
    if state.error is not None:
        return render_error(state.error, refresh)
    if state.loading:
        return render_loading()
    body = "".join(
        [
            "<header><h1>QuickDrop Dashboard</h1>"
            '<p class="muted">File transfer activity and performance</p></header>',
            render_cards(state.overview),
            render_table(state.events),
            render_charts(state.overview),
            # Today is resolved at render time, not when the batch arrived.
            render_performance(state.events, today),
        ]
    )
    return PAGE.format(refresh=refresh, body=body)
