from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from core import config

SEVERITY_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass(frozen=True)
class Thresholds:
    critical_pct: float = config.ALERT_CRITICAL_PCT
    warning_pct: float = config.ALERT_WARNING_PCT


def format_idr(value: float) -> str:
    return f"Rp{float(value):,.0f}".replace(",", ".")


def compute_alerts(
    agent_performance: List[Dict[str, Any]],
    run_rate: Dict[str, Any],
    thresholds: Thresholds = Thresholds(),
) -> List[Dict[str, str]]:
    alerts: List[Dict[str, str]] = []

    if run_rate.get("days_elapsed") and not run_rate.get("is_on_track") and run_rate.get("days_remaining", 0) > 0:
        alerts.append(
            {
                "alert_type": "Target At Risk",
                "severity": "high",
                "message": (
                    f"Projected achievement {run_rate['projected_achievement']:.1f}%. "
                    f"Daily rate {format_idr(run_rate['daily_sales_rate'])} vs "
                    f"{format_idr(run_rate['required_daily_rate'])} required."
                ),
                "action": "Push daily sales above the required rate for the rest of the month.",
            }
        )

    for agent in agent_performance:
        achievement = agent["achievement"]
        gap = agent["target"] - agent["revenue"]
        if achievement < thresholds.critical_pct:
            alerts.append(
                {
                    "alert_type": "Agent Below Target",
                    "severity": "high",
                    "message": f"{agent['name']} at {achievement:.1f}%, gap {format_idr(gap)} to target {format_idr(agent['target'])}.",
                    "action": "Review coaching and floor allocation for this agent.",
                }
            )
        elif achievement < thresholds.warning_pct:
            alerts.append(
                {
                    "alert_type": "Agent Near Target",
                    "severity": "medium",
                    "message": f"{agent['name']} at {achievement:.1f}%, needs {format_idr(gap)} more.",
                    "action": "Keep momentum to close the remaining gap.",
                }
            )

    return sorted(alerts, key=lambda a: SEVERITY_ORDER.get(a["severity"], 3))
