"""Core (UI-agnostic) admin dashboard logic.

This package contains:
- data loading (REST backend -> pandas)
- transaction filter normalization and presets
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
