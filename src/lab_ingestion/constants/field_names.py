# ============================================================================
# src/lab_ingestion/constants/field_names.py
# ============================================================================
"""
Canonical Field Vocabulary
- Ordered name patterns per canonical key
- Exclusion markers for closely related fields

Order matters: the matcher walks keys top to bottom and the first unresolved
key with a matching pattern claims the line. More specific names therefore
come before the generic ones they contain (free testosterone before total,
direct bilirubin before total, lipoprotein fractions before plain cholesterol).
Patterns include common OCR misreadings seen on real reports.
"""

from types import MappingProxyType

FIELD_PATTERNS = MappingProxyType({
    # Hormones
    "free-testosterone": ("Тестостерон свободный", "свободный (расч", "свободный"),
    "testosterone": ("Тестостерон общий",),
    "lh": ("Лютеинизирующий гормон", "гормон (ЛГ)", "(ЛГ)"),
    "fsh": ("Фолликулостимулирующий гормон", "гормон (ФСГ)", "(ФСГ)"),
    "prolactin": ("Пролактин",),
    "estradiol": ("Эстрадиол",),
    "shbg": ("ГСПГ", "Глобулин, связывающий половые", "связывающий половые", "SHBG"),
    "tsh": ("Тиреотропный гормон", "гормон (ТТГ)", "(ТТГ)", "(TTT)", "ТТГ)"),
    "igf1": ("ИФР-1", "IGF-1", "Соматомедин"),
    "fai": ("Индекс свободных андрогенов", "свободных андрогенов"),

    # Lipids
    "hdl": (
        "ЛПВП, HDL", "ЛПВП", "HDL", "высокой плотности", "(ЛПВП", "ЛПВП,",
        "липопротеидов высокой",
    ),
    "ldl": (
        "ЛПНП, LDL", "ЛПНП", "LDL", "низкой плотности", "(ЛПНП", "ЛПНП,",
        "липопротеидов низкой", "JITTHIT",
    ),
    "vldl": (
        "ЛПОНП", "VLDL", "очень низкой плотности", "Липопротеиды очень низкой",
        "ЛПОНП (VLDL)",
    ),
    "non-hdl-cholesterol": (
        "Холестерин не-ЛПВП", "не-ЛПВП", "не ЛПВП", "Холестерин не ЛПВП", "non-HDL", "non HDL",
    ),
    "triglycerides": ("Триглицериды",),
    "cholesterol": ("Холестерин общий", "Холестерол общий", "Холестерин общ", "Холестерин"),
    "atherogenic": ("Коэффициент атерогенности", "атерогенности"),

    # Liver
    "alt": ("Аланинаминотрансфераза", "(АЛТ)", "АЛТ)", "АЛТ"),
    "ast": ("Аспартатаминотрансфераза", "(АСТ)", "АСТ)", "АСТ", "Аспартат"),
    "ggt": ("Гамма-глутамилтрансфераза", "(ГГТ)", "ГГТ)", "ГГТ"),
    "alp": ("Щелочная фосфатаза", "Щелочная", "фосфатаза"),
    "bilirubin-direct": ("Билирубин прямой", "Билирубин, прямой", "прямой"),
    "bilirubin": ("Билирубин общий", "Билирубин, общий", "Билирубин o6щий", "Билирубин общ"),

    # Metabolic
    "glucose": ("Глюкоза",),
    "hba1c": ("Гликированный гемоглобин", "HbA1c"),
    "creatinine": ("Креатинин",),
    "urea": ("Мочевина",),
    "protein": ("Общий белок", "белок общий", "Белок общий", "белок"),
    "vitd": ("Витамин D", "25-OH", "25-ОН"),

    # Coagulation
    "pt": ("Протромбиновое время",),
    "pt-percent": ("Протромбин %", "по Квику", "Протромбин % (по"),
    "inr": ("МНО", "нормализованное отношение", "INR", "(МНО)", "отношение (МНО)"),

    # Blood count
    "hemoglobin": ("Гемоглобин",),
    "hematocrit": ("Гематокрит",),
})

# Exclusion markers (matched case-insensitively)
NON_HDL_MARKERS = ("не-ЛПВП", "не ЛПВП", "non-HDL", "non HDL")
TOTAL_MARKER = "общий"
VLDL_MARKERS = ("ЛПОНП", "VLDL", "очень низкой")
HBA1C_MARKERS = ("гликированный", "HbA1c")
