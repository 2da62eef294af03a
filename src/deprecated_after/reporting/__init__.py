from __future__ import annotations

from .report import build_inventory_payload, build_report_payload, render_inventory_text, render_text, violations_as_rows

__all__ = ["build_inventory_payload", "build_report_payload", "render_inventory_text", "render_text", "violations_as_rows"]
