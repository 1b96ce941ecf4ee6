"""Best-effort medicine detection from prescription images.

Text is read with Tesseract and matched line by line against a fixed list
of drug names. Results are suggestions only; the user confirms them.
"""

import io
import logging
import re
from dataclasses import dataclass
from typing import List

import pytesseract
from PIL import Image, UnidentifiedImageError

from components.core.config import get_settings
from components.core.exceptions import InvalidArgument

logger = logging.getLogger(__name__)
settings = get_settings()

if settings.TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = settings.TESSERACT_CMD

MEDICINE_KEYWORDS = [
    # Diabetes
    "metformin", "glimepiride", "gliclazide", "sitagliptin", "vildagliptin",
    "empagliflozin", "insulin",
    # Hypertension
    "amlodipine", "telmisartan", "losartan", "ramipril", "bisoprolol",
    "nebivolol", "hydrochlorothiazide",
    # Cholesterol / cardiac
    "atorvastatin", "rosuvastatin", "fenofibrate", "aspirin", "clopidogrel",
    # Thyroid
    "levothyroxine",
    # Gastric
    "pantoprazole", "esomeprazole",
    # Bone / deficiency
    "vitamin d", "cholecalciferol", "calcium",
    # Respiratory
    "montelukast", "budesonide", "salbutamol", "tiotropium",
    # Neurology / mental health
    "levetiracetam", "gabapentin", "sertraline",
    # Others
    "allopurinol", "tamsulosin", "finasteride",
    # General
    "paracetamol", "azithromycin", "antibiotic", "cough syrup",
]

# Lines containing any of these belong to invoices, not prescriptions
BLOCK_WORDS = [
    "gst", "invoice", "tax", "total", "amount", "bank",
    "ifsc", "customer", "address", "date", "signature",
]

DEFAULT_DOSAGE = "As prescribed"
_DOSAGE_RE = re.compile(r"\d+\s?(mg|ml|g)", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]", re.IGNORECASE)


@dataclass
class MedicineMatch:
    name: str
    dosage: str


def normalize(text: str) -> str:
    return _NON_ALNUM_RE.sub(" ", text.lower()).strip()


def extract_dosage(line: str) -> str:
    match = _DOSAGE_RE.search(line)
    return match.group(0) if match else DEFAULT_DOSAGE


def detect_medicines(text: str) -> List[MedicineMatch]:
    """Return one match per keyword, in order of first appearance."""
    found = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        clean = normalize(line)
        if any(word in clean for word in BLOCK_WORDS):
            continue
        for keyword in MEDICINE_KEYWORDS:
            if keyword in clean and keyword not in found:
                found[keyword] = MedicineMatch(name=keyword, dosage=extract_dosage(line))
    return list(found.values())


def extract_text(image_bytes: bytes) -> str:
    """Run OCR on an image and return the raw text."""
    try:
        image = Image.open(io.BytesIO(image_bytes))
    except UnidentifiedImageError:
        raise InvalidArgument("Uploaded file is not a readable image")

    text = pytesseract.image_to_string(image, lang="eng")
    logger.debug("OCR extracted %d characters", len(text))
    return text
