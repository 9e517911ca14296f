"""
Reply parsers for the AI analytics reports.

Gemini replies are free text. Two shapes are understood:
- tagged sections ("1. [GROWTH] Title" followed by body lines), used by the
  growth / monthly / risks / trends reports
- plain numbered lines with keyword hints, used by the general insights report
"""
import re
from typing import Dict, List, Sequence, Tuple

from qios.schemas.analytics import Insight

# tag -> (type, impact); "default" applies when no known tag is present
TAG_TABLES: Dict[str, dict] = {
    "growth": {
        "GROWTH": ("growth", "high"),
        "OPPORTUNITY": ("opportunity", "high"),
        "CHALLENGE": ("challenge", "medium"),
        "default": ("growth", "high"),
        "confidence": 0.85,
    },
    "monthly": {
        "ACHIEVEMENT": ("achievement", "high"),
        "IMPROVEMENT": ("improvement", "medium"),
        "CHALLENGE": ("challenge", "high"),
        "default": ("evaluation", "medium"),
        "confidence": 0.85,
    },
    "risks": {
        "RISK": ("risk", "high"),
        "MITIGATION": ("mitigation", "medium"),
        "CONTINGENCY": ("contingency", "medium"),
        "default": ("risk", "high"),
        "confidence": 0.85,
    },
    "trends": {
        "FORECAST": ("forecast", "high"),
        "SEASONAL": ("seasonal", "medium"),
        "TREND": ("trend", "medium"),
        "default": ("forecast", "medium"),
        "confidence": 0.80,
    },
}

_SECTION_START = re.compile(r"(\d+\.\s*\[)")
_SECTION_SPLIT = re.compile(r"\n(?=\d+\.\s*\[)")
_NUMBERED = re.compile(r"^\d+\.\s*")
_ANY_TAG = re.compile(r"\[[A-Za-z_]+\]\s*")


def tags_for(kind: str) -> List[str]:
    return [k for k in TAG_TABLES[kind] if k not in ("default", "confidence")]


def _classify(section: str, table: dict) -> Tuple[str, str]:
    for tag, value in table.items():
        if tag in ("default", "confidence"):
            continue
        if re.search(r"\[%s\]" % tag, section, re.IGNORECASE):
            return value
    return table["default"]


def parse_tagged_sections(text: str, kind: str) -> List[Insight]:
    table = TAG_TABLES[kind]
    # Sections may arrive glued together on one line
    normalized = _SECTION_START.sub(r"\n\1", text or "")

    insights = []
    for section in _SECTION_SPLIT.split(normalized):
        trimmed = section.strip()
        if len(trimmed) < 30:
            continue

        type_, impact = _classify(trimmed, table)
        lines = [l for l in trimmed.split("\n") if l.strip()]
        if not lines:
            continue

        title = _ANY_TAG.sub("", _NUMBERED.sub("", lines[0])).strip()
        description = " ".join(l.strip() for l in lines[1:]).strip()

        if len(title) > 5 and len(description) > 10:
            insights.append(Insight(
                type=type_,
                title=title,
                description=description,
                impact=impact,
                actionable=True,
                confidence=table["confidence"],
            ))
    return insights


def parse_numbered_insights(text: str) -> List[Insight]:
    insights = []
    current = None

    for raw in (text or "").split("\n"):
        line = raw.strip()
        if not line:
            continue

        if _NUMBERED.match(line):
            if current and current.get("title"):
                insights.append(Insight(**current))
            current = {
                "title": _NUMBERED.sub("", line),
                "type": "recommendation",
                "impact": "medium",
                "actionable": True,
                "confidence": 0.8,
            }
        elif current is not None:
            lowered = line.lower()
            if "trend" in lowered or "tren" in lowered:
                current["type"] = "trend"
            elif "warning" in lowered or "peringatan" in lowered:
                current["type"] = "warning"
                current["impact"] = "high"
            elif "anomaly" in lowered or "anomali" in lowered:
                current["type"] = "anomaly"

        if current is not None and len(line) > 20 and not current.get("description"):
            current["description"] = line

    if current and current.get("title"):
        insights.append(Insight(**current))
    return insights


def extract_lines(text: str, keywords: Sequence[str]) -> List[str]:
    found = []
    for raw in (text or "").split("\n"):
        line = raw.strip()
        lowered = line.lower()
        if line and any(k in lowered for k in keywords):
            found.append(line)
    return found


def extract_recommendations(text: str) -> List[str]:
    return extract_lines(text, ("recommend", "saran", "suggest"))


def extract_risks(text: str) -> List[str]:
    return extract_lines(text, ("risk", "risiko", "warning", "peringatan"))


def calculate_trend(values: Sequence[float]) -> str:
    """Compare the mean of the second half against the first: ±10% bands."""
    if len(values) < 2:
        return "insufficient data"

    mid = len(values) // 2
    first, second = values[:mid], values[mid:]
    first_avg = sum(first) / len(first)
    second_avg = sum(second) / len(second)
    if first_avg == 0:
        return "increasing" if second_avg > 0 else "stable"

    change = (second_avg - first_avg) / first_avg * 100
    if change > 10:
        return "increasing"
    if change < -10:
        return "decreasing"
    return "stable"
