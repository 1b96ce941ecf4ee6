from components.prescription.ocr import (
    DEFAULT_DOSAGE,
    detect_medicines,
    extract_dosage,
    normalize,
)

SCANNED = """
Dr. A. Sharma  Reg No 1234
Tab. Metformin 500mg  1-0-1
Tab Amlodipine 5 mg once daily
Invoice total amount Metformin 999
Syp. Cough Syrup 10ml at night
Tab. METFORMIN 1000 mg
"""


def test_normalize_lowercases_and_strips_punctuation():
    assert normalize("  Tab. Metformin-500mg! ") == "tab  metformin 500mg"


def test_extract_dosage():
    assert extract_dosage("Tab Metformin 500mg") == "500mg"
    assert extract_dosage("Amlodipine 5 mg daily") == "5 mg"
    assert extract_dosage("Syrup 10 ML") == "10 ML"
    assert extract_dosage("Vitamin tablets") == DEFAULT_DOSAGE


def test_detect_medicines_matches_keywords_once():
    matches = detect_medicines(SCANNED)
    names = [m.name for m in matches]
    assert names == ["metformin", "amlodipine", "cough syrup"]
    assert matches[0].dosage == "500mg"
    assert matches[1].dosage == "5 mg"


def test_detect_medicines_skips_blocked_lines():
    assert detect_medicines("GST invoice: Paracetamol 650mg") == []


def test_detect_medicines_empty_text():
    assert detect_medicines("") == []
