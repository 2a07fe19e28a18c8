"""Disease extraction from bulletin titles."""

import re
from typing import List, Tuple

UNKNOWN_DISEASE = "Unknown Disease"

# Evaluated top to bottom, first match wins. "respiratory syndrome" must stay
# below the MERS pattern.
DISEASE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"cholera", re.IGNORECASE), "Cholera"),
    (re.compile(r"ebola", re.IGNORECASE), "Ebola"),
    (re.compile(r"marburg", re.IGNORECASE), "Marburg Virus"),
    (re.compile(r"mpox|monkeypox", re.IGNORECASE), "Mpox"),
    (re.compile(r"measles", re.IGNORECASE), "Measles"),
    (re.compile(r"dengue", re.IGNORECASE), "Dengue"),
    (re.compile(r"yellow fever", re.IGNORECASE), "Yellow Fever"),
    (re.compile(r"plague", re.IGNORECASE), "Plague"),
    (re.compile(r"avian influenza|h5n1|bird flu", re.IGNORECASE), "H5N1 Avian Influenza"),
    (re.compile(r"influenza a\(h1n1\)|h1n1", re.IGNORECASE), "Influenza A (H1N1)"),
    (re.compile(r"polio", re.IGNORECASE), "Polio"),
    (re.compile(r"meningitis|meningococcal", re.IGNORECASE), "Meningitis"),
    (re.compile(r"lassa fever", re.IGNORECASE), "Lassa Fever"),
    (re.compile(r"rift valley fever", re.IGNORECASE), "Rift Valley Fever"),
    (re.compile(r"diphtheria", re.IGNORECASE), "Diphtheria"),
    (re.compile(r"malaria", re.IGNORECASE), "Malaria"),
    (re.compile(r"zika", re.IGNORECASE), "Zika"),
    (re.compile(r"chikungunya", re.IGNORECASE), "Chikungunya"),
    (re.compile(r"covid|sars-cov", re.IGNORECASE), "COVID-19"),
    (re.compile(r"hepatitis", re.IGNORECASE), "Hepatitis"),
    (re.compile(r"nipah", re.IGNORECASE), "Nipah Virus"),
    (re.compile(r"mers", re.IGNORECASE), "MERS-CoV"),
    (re.compile(r"oropouche", re.IGNORECASE), "Oropouche"),
    (re.compile(r"respiratory syndrome", re.IGNORECASE), "MERS-CoV"),
]


def extract_disease(title: str) -> str:
    """Return the canonical disease name mentioned in a title."""
    for pattern, name in DISEASE_PATTERNS:
        if pattern.search(title):
            return name
    return UNKNOWN_DISEASE
