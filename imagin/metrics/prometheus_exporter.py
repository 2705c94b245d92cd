"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge


image_uploads_total = Counter(
    "image_uploads_total",
    "Total number of image uploads by outcome.",
    ["outcome"],
)

image_edits_total = Counter(
    "image_edits_total",
    "Total number of edit requests by outcome.",
    ["outcome"],
)

active_sessions = Gauge(
    "active_sessions",
    "Number of currently active editor sessions.",
)
