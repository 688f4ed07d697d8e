"""Seeded generator of demo analysis jobs."""

from __future__ import annotations

import random
from typing import Any

from forge_core.schemas import AnalysisJob

_PALETTE = ("#1976d2", "#4caf50", "#ff9800", "#9c27b0", "#f44336", "#009688")
_CARD_TITLES = ("Revenue", "Active Users", "Orders", "Conversion")
_BUTTON_LABELS = ("Save", "Export", "Refresh", "Add item")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun")


def _color(rng: random.Random) -> str:
    return rng.choice(_PALETTE)


def _position(rng: random.Random, x: int, y: int, width: tuple[int, int], height: tuple[int, int]) -> dict[str, int]:
    return {
        "x": x,
        "y": y,
        "width": rng.randint(*width),
        "height": rng.randint(*height),
    }


def demo_elements(rng: random.Random) -> list[dict[str, Any]]:
    primary = _color(rng)
    elements: list[dict[str, Any]] = [
        {
            "id": "header",
            "type": "header",
            "properties": {"title": "Dashboard", "color": primary, "fontSize": 24, "fontWeight": "bold"},
            "position": {"x": 0, "y": 0, "width": 1200, "height": 64},
        }
    ]

    for i, title in enumerate(rng.sample(_CARD_TITLES, k=3)):
        elements.append(
            {
                "id": f"card-{i + 1}",
                "type": "card",
                "properties": {
                    "title": title,
                    "value": str(rng.randint(100, 10000)),
                    "color": primary,
                    "backgroundColor": "#ffffff",
                    "borderRadius": "8px",
                },
                "position": _position(rng, 24 + i * 300, 88, (240, 300), (100, 140)),
            }
        )

    elements.append(
        {
            "id": "chart-1",
            "type": "chart",
            "properties": {
                "title": "Monthly sales",
                "color": _color(rng),
                "data": {
                    "type": "line",
                    "labels": list(_MONTHS),
                    "values": [rng.randint(10, 100) for _ in _MONTHS],
                },
            },
            "position": _position(rng, 24, 260, (500, 700), (280, 360)),
        }
    )

    columns = ["name", "status", "amount"]
    elements.append(
        {
            "id": "table-1",
            "type": "table",
            "properties": {
                "columns": columns,
                "data": [
                    {
                        "name": f"Order {n}",
                        "status": rng.choice(["paid", "pending", "refunded"]),
                        "amount": rng.randint(10, 500),
                    }
                    for n in range(1, rng.randint(3, 6))
                ],
                "fontSize": "14px",
            },
            "position": _position(rng, 760, 260, (380, 440), (240, 320)),
        }
    )

    elements.append(
        {
            "id": "button-1",
            "type": "button",
            "properties": {
                "text": rng.choice(_BUTTON_LABELS),
                "color": primary,
                "backgroundColor": primary,
                "textColor": "#ffffff",
            },
            "position": _position(rng, 24, 640, (100, 140), (36, 44)),
        }
    )
    return elements


def demo_job(seed: int = 0, job_id: str | None = None) -> AnalysisJob:
    """Build a small dashboard analysis; the same seed yields the same job."""
    rng = random.Random(seed)
    return AnalysisJob.model_validate(
        {
            "jobId": job_id or f"demo-{seed}",
            "elements": demo_elements(rng),
            "colors": {"primary": "#1976d2", "background": "#fafafa", "text": "#212121"},
            "typography": {"primaryFont": "Roboto, sans-serif", "primarySize": "14px", "lineHeight": 1.5},
            "layout": {"type": "flex", "direction": "column", "gap": "16px", "padding": "24px"},
            "metadata": {"source": "demo", "seed": seed},
        }
    )
