from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

from tutorium.charts import to_vega_spec
from tutorium.records import is_truthy

SEGMENTS = [("teacher", "Teacher"), ("non_teacher", "Learner")]


def user_composition(users: pd.DataFrame) -> Dict[str, int]:
    """Teacher / non-teacher split, teacher first."""
    total = int(len(users))
    if users.empty:
        teachers = 0
    elif "is_teacher" in users.columns:
        teachers = int(users["is_teacher"].sum())
    else:
        teachers = int(users["teacher_id"].map(is_truthy).sum())
    return {"teacher": teachers, "non_teacher": total - teachers}


def compute_user_composition(data_ctx: Dict[str, Any]) -> Dict[str, Any]:
    counts = user_composition(data_ctx.get("users", pd.DataFrame()))
    total = sum(counts.values())
    segments = [
        {"key": key, "label": label, "count": counts[key], "share": (counts[key] / total) if total else None}
        for key, label in SEGMENTS
    ]

    chart = None
    if total:
        df = pd.DataFrame(segments)
        order = [label for _, label in SEGMENTS]
        donut = (
            alt.Chart(df)
            .mark_arc(innerRadius=60)
            .encode(
                theta=alt.Theta("count:Q"),
                color=alt.Color("label:N", title="Users", sort=order, scale=alt.Scale(domain=order, range=["#2563eb", "#16a34a"])),
                order=alt.Order("key:N", sort="descending"),
                tooltip=["label", alt.Tooltip("count:Q", format=","), alt.Tooltip("share:Q", format=".1%")],
            )
            .properties(height=260)
        )
        chart = to_vega_spec(donut)

    return {"counts": counts, "total": total, "segments": segments, "chart": chart}
