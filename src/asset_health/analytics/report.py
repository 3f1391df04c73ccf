"""Plain-text rendering of the asset health overview and rankings."""

from __future__ import annotations

from asset_health.analytics.models import AssetMetrics, HealthMetricsSummary


def format_health_report(
    summary: HealthMetricsSummary,
    downtime: list[AssetMetrics] | None = None,
    cost: list[AssetMetrics] | None = None,
) -> str:
    """Format a health overview, optionally with downtime and cost rankings.

    Args:
        summary: Result of the health overview.
        downtime: Optional downtime ranking.
        cost: Optional maintenance-cost ranking.

    Returns:
        Formatted text report.
    """
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append("ASSET HEALTH REPORT")
    lines.append("=" * 60)
    lines.append("")

    lines.append("OVERVIEW")
    lines.append("-" * 40)
    lines.append(f"Total Assets:        {summary.total_assets}")
    lines.append(f"Active Assets:       {summary.active_assets}")
    lines.append(f"Assets With Issues:  {summary.assets_with_issues}")
    lines.append(f"Avg Health Score:    {summary.average_health_score:.1f}")
    lines.append("")

    lines.append("CRITICAL ASSETS")
    lines.append("-" * 40)
    if summary.critical_assets:
        for i, m in enumerate(summary.critical_assets, 1):
            lines.append(
                f"  {i:>2}. {m.code:<16} {m.name:<24} score={m.health_score:.1f}"
            )
    else:
        lines.append("  None")
    lines.append("")

    if downtime:
        lines.extend(_metrics_table("TOP DOWNTIME", downtime))
    if cost:
        lines.extend(_metrics_table("TOP MAINTENANCE COST", cost))

    lines.append("=" * 60)
    return "\n".join(lines)


def _metrics_table(title: str, metrics: list[AssetMetrics]) -> list[str]:
    code_w = max(len("Code"), *(len(m.code) for m in metrics))
    lines = [title, "-" * 40]
    lines.append(
        f"{'Code':<{code_w}}  {'Downtime h':>10}  {'Faults':>6}  {'Cost':>10}  {'Health':>6}  {'Last Maint.'}"
    )
    lines.append("-" * (code_w + 56))
    for m in metrics:
        last = m.last_maintenance_date.strftime("%Y-%m-%d") if m.last_maintenance_date else "N/A"
        lines.append(
            f"{m.code:<{code_w}}  {m.total_downtime_hours:>10,.2f}  {m.fault_frequency:>6}  "
            f"{m.maintenance_cost:>10,.2f}  {m.health_score:>6.1f}  {last}"
        )
    lines.append("")
    return lines
