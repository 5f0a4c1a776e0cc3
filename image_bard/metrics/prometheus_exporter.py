"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter


image_normalizations_total = Counter(
    "image_normalizations_total",
    "Total number of image normalisation attempts.",
    ["source", "outcome"],
)

poem_generations_total = Counter(
    "poem_generations_total",
    "Total number of poem generation requests.",
    ["outcome"],
)
