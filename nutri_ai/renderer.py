"""
Maps the parsed nutrition object onto display values.

Defaulting differs per field:
- total_calories falls back to "N/A" when missing, non-numeric or rounding to 0
- macronutrients fall back to 0 when missing (a real 0 still shows as 0)
- micronutrients fall back to "N/A" only when missing or null (0 is a reading)
"""

import html
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

NOT_AVAILABLE = "N/A"
DEFAULT_CONFIDENCE = "Medium"
DEFAULT_HEALTH_TIP = "Enjoy your meal mindfully!"
NO_ITEMS_PLACEHOLDER = "No specific items identified."
UNKNOWN_ITEM = "Unknown item"

MACRONUTRIENTS = ("protein_g", "carbs_g", "fat_g", "fiber_g")


@dataclass(frozen=True)
class ResultView:
    total_calories: str
    confidence_label: str
    confidence_class: str
    protein_g: str
    carbs_g: str
    fat_g: str
    fiber_g: str
    sugar_g: str
    sodium_mg: str
    items: List[str] = field(default_factory=list)
    general_summary: str = ""
    health_tips: str = DEFAULT_HEALTH_TIP

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _display(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _total_calories(value: Any) -> str:
    if not _is_number(value):
        return NOT_AVAILABLE
    rounded = _round_half_up(value)
    return str(rounded) if rounded else NOT_AVAILABLE


def _macro(value: Any) -> str:
    if value is None or value == "" or value is False:
        return "0"
    return _display(value)


def _micro(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    return _display(value)


def _item_line(item: Any) -> str:
    if not isinstance(item, dict):
        item = {}
    name = item.get("item") or UNKNOWN_ITEM
    calories = item.get("calories")
    kcal = str(_round_half_up(calories)) if _is_number(calories) else NOT_AVAILABLE
    return f"{name} (~{kcal} kcal)"


def render_result(data: Dict[str, Any]) -> ResultView:
    summary = _section(data, "nutrition_summary")
    macros = _section(summary, "macronutrients")
    micros = _section(summary, "micronutrients")

    confidence = data.get("confidence_score") or DEFAULT_CONFIDENCE

    items = data.get("items")
    if isinstance(items, list) and items:
        item_lines = [_item_line(item) for item in items]
    else:
        item_lines = [NO_ITEMS_PLACEHOLDER]

    return ResultView(
        total_calories=_total_calories(summary.get("total_calories")),
        confidence_label=str(confidence),
        confidence_class=str(confidence).lower(),
        items=item_lines,
        sugar_g=_micro(micros.get("sugar_g")),
        sodium_mg=_micro(micros.get("sodium_mg")),
        general_summary=str(data.get("general_summary") or ""),
        health_tips=str(data.get("health_tips") or DEFAULT_HEALTH_TIP),
        **{name: _macro(macros.get(name)) for name in MACRONUTRIENTS},
    )


def render_html(view: ResultView) -> str:
    """HTML fragment for the results screen. Model text is escaped."""
    e = html.escape
    macro_cards = "".join(
        f'<div class="macro-card"><h3>{label}</h3><p>{e(value)}<small>g</small></p></div>'
        for label, value in (
            ("Protein", view.protein_g),
            ("Carbs", view.carbs_g),
            ("Fat", view.fat_g),
            ("Fiber", view.fiber_g),
        )
    )
    item_list = "".join(f"<li>{e(line)}</li>" for line in view.items)
    summary = f"<p>{e(view.general_summary)}</p>" if view.general_summary else ""

    return (
        '<div class="result-item" id="total-calories-display">'
        f"<span>{e(view.total_calories)}</span> <small>kcal</small></div>"
        f'<div class="result-item confidence-pill {e(view.confidence_class, quote=True)}">'
        f"{e(view.confidence_label)} Confidence</div>"
        f'<div class="result-item macros-grid">{macro_cards}</div>'
        '<div class="result-item details-card">'
        f"<h3>Identified Items</h3><ul>{item_list}</ul>"
        f"{summary}"
        "<h3>Details &amp; Tip</h3><ul>"
        f"<li>Sugar: {e(view.sugar_g)}g</li>"
        f"<li>Sodium: {e(view.sodium_mg)}mg</li>"
        "</ul>"
        f"<p>{e(view.health_tips)}</p>"
        "</div>"
    )
