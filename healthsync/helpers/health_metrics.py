"""
Read-time derivations over health logs.

Nothing here is persisted: alerts, averages, stats and search matches are
recomputed from the rows every time they are asked for.
"""
from typing import Any, Dict, List, Optional, Sequence

from healthsync.helpers.enums import AlertLevel, HealthMetric

HIGH_HEART_RATE_BPM = 100
MIN_SLEEP_HOURS = 6
MIN_WATER_ML = 1500
MIN_STEPS = 5000

# (keywords, predicate); the first rule whose keyword appears in the query wins
SMART_SEARCH_RULES = (
    (('low sleep', 'tired'), lambda log: log.sleep_hours < 7),
    (('high heart rate', 'fast heart'), lambda log: log.heart_rate > 80),
    (('low water', 'dehydrated'), lambda log: log.water_ml < 2000),
    (('low steps', 'inactive'), lambda log: log.steps < 5000),
)


def health_alerts(latest: Any) -> List[Dict[str, Any]]:
    if latest is None:
        return []

    alerts = []
    if latest.heart_rate > HIGH_HEART_RATE_BPM:
        alerts.append({'type': AlertLevel.WARNING, 'message': 'High heart rate detected'})
    if latest.sleep_hours < MIN_SLEEP_HOURS:
        alerts.append({'type': AlertLevel.WARNING, 'message': 'Insufficient sleep'})
    if latest.water_ml < MIN_WATER_ML:
        alerts.append({'type': AlertLevel.INFO, 'message': 'Low water intake'})
    if latest.steps < MIN_STEPS:
        alerts.append({'type': AlertLevel.INFO, 'message': 'Low activity level'})
    return alerts


def average_metrics(logs: Sequence[Any]) -> Optional[Dict[str, Any]]:
    if not logs:
        return None

    count = len(logs)
    return {
        'steps': round(sum(log.steps for log in logs) / count),
        'water_ml': round(sum(log.water_ml for log in logs) / count),
        'heart_rate': round(sum(log.heart_rate for log in logs) / count),
        'sleep_hours': round(sum(log.sleep_hours for log in logs) / count, 1),
    }


def metric_stats(logs: Sequence[Any], metric: HealthMetric) -> Dict[str, Any]:
    """
    Average, min, max and trend of one metric.

    ``logs`` is newest first, as history returns it. The trend compares the
    older half of the entries with the newer half.
    """
    values = [getattr(log, metric.value) for log in reversed(logs)]
    if not values:
        return {'metric': metric, 'count': 0}

    stats = {
        'metric': metric,
        'count': len(values),
        'average': round(sum(values) / len(values), 1),
        'minimum': min(values),
        'maximum': max(values),
        'trend': 'flat',
    }
    half = len(values) // 2
    if half:
        older, newer = values[:half], values[half:]
        older_avg = sum(older) / len(older)
        newer_avg = sum(newer) / len(newer)
        if newer_avg > older_avg:
            stats['trend'] = 'up'
        elif newer_avg < older_avg:
            stats['trend'] = 'down'
    return stats


def matches_search(log: Any, query: str) -> bool:
    query = query.strip().lower()
    if not query:
        return True

    for keywords, predicate in SMART_SEARCH_RULES:
        if any(keyword in query for keyword in keywords):
            return predicate(log)

    if log.notes and query in log.notes.lower():
        return True
    return query in log.date.strftime('%b %d, %Y').lower()
