"""Plain-text output helpers: aligned tables, key/value blocks, dates."""

import json
from datetime import datetime
from typing import Any, Dict, Iterable, List, Sequence, Tuple

Column = Tuple[str, str]  # (header, key)


def format_datetime(value: Any) -> str:
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime("%Y-%m-%d %H:%M")


def _cell(value: Any) -> str:
    if value is None or value == "":
        return "-"
    return str(value)


def table(rows: Iterable[Dict[str, Any]], columns: Sequence[Column]) -> str:
    rendered: List[List[str]] = [[header for header, _ in columns]]
    for row in rows:
        rendered.append([_cell(row.get(key)) for _, key in columns])

    widths = [max(len(r[i]) for r in rendered) for i in range(len(columns))]
    lines = []
    for index, r in enumerate(rendered):
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(r)).rstrip())
        if index == 0:
            lines.append("  ".join("-" * w for w in widths))
    return "\n".join(lines)


def details(pairs: Sequence[Tuple[str, Any]]) -> str:
    width = max(len(label) for label, _ in pairs)
    return "\n".join(f"  {label.ljust(width)}  {_cell(value)}" for label, value in pairs)


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
