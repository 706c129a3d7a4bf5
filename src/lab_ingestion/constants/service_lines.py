# ============================================================================
# src/lab_ingestion/constants/service_lines.py
# ============================================================================
"""
Service Line Markers
- Table headers, section titles and lab/patient boilerplate that never
  carry a measurement

All markers are lowercase; lines are lowercased before comparison.
"""

from types import MappingProxyType

# Any one of these marks a service line
SERVICE_LINE_MARKERS = (
    "наименование исследования",
    "ед. изм",
    "нормальные значения",
    "исследования крови",
    "коагулологические",
    "биохимические",
    "направлени",
    "фамилия",
    "дата рождения",
    "kdl",
    "медскан",
    "не является диагнозом",
    "лечащий врач",
    "адрес пациента",
    "белковые фракции",
)

# All markers of a group must be present ("Результат ... Референсные значения")
SERVICE_LINE_MARKER_GROUPS = (
    ("результат", "референс"),
)

# Section titles that only count when the line is short:
# marker -> maximum line length
SHORT_SECTION_TITLES = MappingProxyType({
    "гормоны": 20,
    "онкомаркеры": 30,
})

MIN_LINE_LENGTH = 3

# Value cell of a test the lab has not finished
IN_PROGRESS_MARKER = "Выполняется"
