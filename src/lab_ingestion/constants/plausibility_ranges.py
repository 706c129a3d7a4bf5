# ============================================================================
# src/lab_ingestion/constants/plausibility_ranges.py
# ============================================================================
"""
Plausibility Ranges
- (min, max) bounds per canonical key, inclusive
- Wide enough for pathological values, narrow enough to reject
  reference-range fragments, dates and OCR noise

Units follow the common Russian lab conventions (нмоль/л, ммоль/л, Ед/л).
"""

from types import MappingProxyType

PLAUSIBILITY_RANGES = MappingProxyType({
    # Hormones
    "testosterone": (5.0, 50.0),
    "free-testosterone": (0.1, 2.0),
    "lh": (0.3, 20.0),
    "fsh": (0.3, 20.0),
    "prolactin": (50.0, 1000.0),
    "estradiol": (10.0, 300.0),
    "shbg": (10.0, 100.0),
    "tsh": (0.1, 10.0),
    "igf1": (50.0, 500.0),
    "fai": (10.0, 200.0),

    # Lipids
    "cholesterol": (2.0, 10.0),
    "hdl": (0.5, 3.0),
    "ldl": (0.5, 6.0),
    "triglycerides": (0.3, 5.0),
    "vldl": (0.1, 2.0),
    "atherogenic": (0.5, 10.0),
    "non-hdl-cholesterol": (1.0, 8.0),

    # Liver
    "alt": (5.0, 200.0),
    "ast": (5.0, 200.0),
    "ggt": (5.0, 150.0),
    "alp": (20.0, 300.0),
    "bilirubin": (2.0, 50.0),
    "bilirubin-direct": (0.5, 15.0),

    # Metabolic
    "glucose": (1.0, 30.0),
    "hba1c": (3.0, 15.0),
    "creatinine": (30.0, 200.0),
    "urea": (1.0, 20.0),
    "protein": (50.0, 100.0),
    "vitd": (5.0, 200.0),

    # Coagulation
    "pt": (8.0, 25.0),
    "pt-percent": (50.0, 150.0),
    "inr": (0.5, 2.0),

    # Blood count
    "hemoglobin": (80.0, 200.0),
    "hematocrit": (25.0, 60.0),
})

# Rescue ranking floor for keys without a registered range
DEFAULT_RANGE = (0.0, 1000.0)
