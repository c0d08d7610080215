# sheetlens/observability/metrics.py
from __future__ import annotations

import re
from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, List, Tuple

Labels = Tuple[Tuple[str, str], ...]
SeriesKey = Tuple[str, Labels]


@dataclass
class TimerStat:
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


_lock = Lock()
_counters: Dict[SeriesKey, int] = {}
_timers: Dict[SeriesKey, TimerStat] = {}


def _series(name: str, labels: Dict[str, Any]) -> SeriesKey:
    return name, tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def inc_counter(name: str, value: int = 1, **labels: Any) -> None:
    key = _series(name, labels)
    with _lock:
        _counters[key] = _counters.get(key, 0) + int(value)


def observe_ms(name: str, value_ms: float, **labels: Any) -> None:
    key = _series(name, labels)
    with _lock:
        stat = _timers.setdefault(key, TimerStat())
        stat.count += 1
        stat.total_ms += float(value_ms)
        stat.max_ms = max(stat.max_ms, float(value_ms))


def get_counter(name: str, **labels: Any) -> int:
    with _lock:
        return _counters.get(_series(name, labels), 0)


def snapshot_metrics() -> Dict[str, Dict[str, Any]]:
    with _lock:
        counters = {key: value for key, value in _counters.items()}
        timers = {
            key: TimerStat(stat.count, stat.total_ms, stat.max_ms)
            for key, stat in _timers.items()
        }
    return {"counters": counters, "timers": timers}


def _metric_name(name: str) -> str:
    sanitized = re.sub(r"[^a-zA-Z0-9_:]", "_", name)
    if not re.match(r"^[a-zA-Z_:]", sanitized):
        sanitized = f"metric_{sanitized}"
    return sanitized


def _label_text(labels: Labels) -> str:
    if not labels:
        return ""
    parts = []
    for k, v in labels:
        key = re.sub(r"[^a-zA-Z0-9_]", "_", k)
        value = v.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')
        parts.append(f'{key}="{value}"')
    return "{" + ",".join(parts) + "}"


def render_prometheus_metrics() -> str:
    """Render counters and timers in the Prometheus text exposition format."""
    snap = snapshot_metrics()
    lines: List[str] = []

    counters: Dict[str, List[Tuple[Labels, int]]] = {}
    for (name, labels), value in snap["counters"].items():
        counters.setdefault(_metric_name(name), []).append((labels, value))

    for name in sorted(counters):
        lines.append(f"# HELP {name} In-memory counter metric.")
        lines.append(f"# TYPE {name} counter")
        for labels, value in sorted(counters[name]):
            lines.append(f"{name}{_label_text(labels)} {value}")

    timers: Dict[str, List[Tuple[Labels, TimerStat]]] = {}
    for (name, labels), stat in snap["timers"].items():
        timers.setdefault(_metric_name(name), []).append((labels, stat))

    for name in sorted(timers):
        lines.append(f"# TYPE {name}_count counter")
        lines.append(f"# TYPE {name}_sum counter")
        lines.append(f"# TYPE {name}_max gauge")
        lines.append(f"# TYPE {name}_avg gauge")
        for labels, stat in sorted(timers[name], key=lambda item: item[0]):
            text = _label_text(labels)
            lines.append(f"{name}_count{text} {stat.count}")
            lines.append(f"{name}_sum{text} {round(stat.total_ms, 3)}")
            lines.append(f"{name}_max{text} {round(stat.max_ms, 3)}")
            lines.append(f"{name}_avg{text} {round(stat.avg_ms, 3)}")

    return "\n".join(lines) + "\n" if lines else ""
