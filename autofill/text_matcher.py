"""
Label text normalization and fuzzy matching
"""
import re
import unicodedata

from rapidfuzz.distance import Levenshtein

# Tunable: no derivation behind the value, override via matching.fuzzy_threshold.
FUZZY_MATCH_THRESHOLD = 80


def normalize(text):
    """Lower-case, drop diacritics and punctuation, collapse whitespace."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(text))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    value = stripped.lower()
    value = re.sub(r"[^\w\s]", "", value)
    value = re.sub(r"\s+", " ", value)
    return value.strip()


def similarity(a, b):
    """
    Edit-distance similarity of the normalized strings, as a percentage.

    100 * (maxLen - distance) / maxLen
    """
    norm_a = normalize(a)
    norm_b = normalize(b)
    if norm_a == norm_b:
        return 100.0
    if not norm_a or not norm_b:
        return 0.0
    longest = max(len(norm_a), len(norm_b))
    distance = Levenshtein.distance(norm_a, norm_b)
    return 100.0 * (longest - distance) / longest


def is_fuzzy_match(a, b, threshold=FUZZY_MATCH_THRESHOLD):
    norm_a = normalize(a)
    norm_b = normalize(b)
    if not norm_a or not norm_b:
        return False
    if norm_a == norm_b:
        return True
    if norm_a in norm_b or norm_b in norm_a:
        return True
    return similarity(norm_a, norm_b) >= threshold


def search_variants(text):
    """
    Spellings of an option label worth trying against page text
    (as typed, lower, upper, capitalized, trimmed, without punctuation).
    """
    raw = str(text or "")
    variants = [raw, raw.lower(), raw.upper(), raw[:1].upper() + raw[1:].lower(), raw.strip()]

    clean = re.sub(r"[^\w\s]", "", raw).strip()
    if clean != raw:
        variants.extend([clean, clean.lower(), clean.upper()])

    seen = set()
    result = []
    for variant in variants:
        if variant and variant not in seen:
            seen.add(variant)
            result.append(variant)
    return result
