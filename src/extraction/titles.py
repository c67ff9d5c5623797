from __future__ import annotations

import re

# Words kept lowercase unless they open the title.
SMALL_WORDS = frozenset({"and", "or", "in", "of", "the", "for", "to", "at"})

# Known recognition confusions, applied as whole words, case-insensitively.
# No right-hand side contains a left-hand side, so one pass is final.
OCR_CONFUSIONS: tuple[tuple[str, str], ...] = (
    ("Cormputing", "Computing"),
    ("Cormputer", "Computer"),
    ("Oomputer", "Computer"),
    ("Hurman", "Human"),
    ("Cormmunications", "Communications"),
    ("Cormmunication", "Communication"),
    ("Moverment", "Movement"),
    ("Anaysis", "Analysis"),
    ("Appreciatier", "Appreciation"),
    ("Pagpapatalaga", "Pagpapahalaga"),
    ("Readingsin", "Readings in"),
    ("VWorld", "World"),
    ("VVorld", "World"),
    ("Worfd", "World"),
    ("Worid", "World"),
    ("Exerc", "Exercise"),
    ("Trairung", "Training"),
    ("CSThesis", "CS Thesis"),
    ("CWS", "CWTS"),
    ("Fiipino", "Filipino"),
    ("Fihpino", "Filipino"),
    ("Phihppine", "Philippine"),
    ("Philhppine", "Philippine"),
    ("Philippme", "Philippine"),
    ("Technoiogy", "Technology"),
    ("Technohogy", "Technology"),
    ("Seff", "Self"),
    ("Sef", "Self"),
    ("Histor", "History"),
    ("Historv", "History"),
    ("Mathemati", "Mathematic"),
    ("Distnbuted", "Distributed"),
    ("Netw orks", "Networks"),
    ("Netwoiks", "Networks"),
    ("Programm", "Programming"),
    ("Prograrnn", "Programming"),
    ("Infonnation", "Information"),
    ("Informahon", "Information"),
    ("lnformation", "Information"),
    ("Softw are", "Software"),
    ("Softwaie", "Software"),
    ("Structuie", "Structure"),
    ("Structur", "Structure"),
    ("Developm ent", "Development"),
    ("Organizafion", "Organization"),
    ("Organizahon", "Organization"),
    ("Architectur", "Architecture"),
    ("Secufity", "Security"),
    ("Secur ty", "Security"),
)

# "rn" read for "m": only repaired when the result is a known word, so real
# words such as "Modern" or "Learning" are left alone.
RN_LEXICON = frozenset(
    {
        "algorithm",
        "algorithms",
        "communication",
        "communications",
        "competency",
        "computer",
        "computing",
        "development",
        "environmental",
        "human",
        "management",
        "mathematical",
        "mathematics",
        "movement",
        "multimedia",
        "program",
        "programming",
        "programs",
        "system",
        "systems",
    }
)

_CONFUSION_PATS: tuple[tuple[re.Pattern[str], str, str], ...] = tuple(
    (re.compile(r"\b" + re.escape(wrong) + r"\b", re.IGNORECASE), wrong, right)
    for wrong, right in OCR_CONFUSIONS
)

# "Lipunan" usually loses its leading "at".
_LIPUNAN_PAT = re.compile(r"(?<!at )\bLipunan\b", re.IGNORECASE)
_ELLIPSIS_TRAINING_PAT = re.compile(r"\bTraining\.\.\.", re.IGNORECASE)

_TRAILING_NOISE_PAT = re.compile(r"\s+(?:Total|Grade|Elective|O\.H|OA|APAM|J)$", re.IGNORECASE)
_CAMEL_PAT = re.compile(r"([a-z])([A-Z])")
_WORD_PAT = re.compile(r"[A-Za-z]+")


def _normalize_ws(s: str) -> str:
    return " ".join(s.split())


def _fix_rn(word_match: re.Match[str]) -> str:
    word = word_match.group(0)
    if "rn" not in word:
        return word
    candidate = word.replace("rn", "m")
    return candidate if candidate.lower() in RN_LEXICON else word


def _strip_noise(s: str) -> str:
    # Runs to a fixpoint: trailing noise tokens and unbalanced parentheses.
    while True:
        before = s
        s = _TRAILING_NOISE_PAT.sub("", s).strip()
        if s.endswith(")") and s.count(")") > s.count("("):
            s = s[:-1].rstrip()
        if s.startswith("(") and s.count("(") > s.count(")"):
            s = s[1:].lstrip()
        if s == before:
            return s


def _capitalize(s: str) -> str:
    words = s.split(" ")
    out: list[str] = []
    for i, w in enumerate(words):
        if i > 0 and w.lower() in SMALL_WORDS:
            out.append(w.lower())
        elif w.isupper() or any(ch.isdigit() for ch in w):
            # acronyms (LTS/CWTS/ROTC) and numbered tokens keep their shape
            out.append(w)
        else:
            out.append(w[:1].upper() + w[1:].lower())
    return " ".join(out)


def correct_title(title: str) -> tuple[str, list[str]]:
    """
    Clean up a recognized subject title.

    Pure and stable: correct_title(correct_title(t)[0])[0] == correct_title(t)[0].
    Returns the corrected title and a list of human-readable change notes.
    """

    if not title or len(title.strip()) < 2:
        return title, []

    changes: list[str] = []
    s = _normalize_ws(title)

    split = _CAMEL_PAT.sub(r"\1 \2", s)
    if split != s:
        changes.append("Split joined words")
        s = split

    for pat, wrong, right in _CONFUSION_PATS:
        fixed = pat.sub(right, s)
        if fixed != s:
            changes.append(f'"{wrong}" -> "{right}"')
            s = fixed

    fixed = _LIPUNAN_PAT.sub("at Lipunan", s)
    fixed = _ELLIPSIS_TRAINING_PAT.sub("Training", fixed)
    fixed = _WORD_PAT.sub(_fix_rn, fixed)
    if fixed != s:
        changes.append("Fixed misread letters")
        s = fixed

    stripped = _strip_noise(s)
    if stripped != s:
        changes.append("Removed noise")
        s = stripped

    s = _capitalize(_normalize_ws(s))
    return s, changes


def correct_titles(titles: list[str]) -> list[tuple[str, str, list[str]]]:
    """Batch form: (original, corrected, changes) per title."""
    out: list[tuple[str, str, list[str]]] = []
    for t in titles:
        corrected, changes = correct_title(t)
        out.append((t, corrected, changes))
    return out


_PROBABLE_ERROR_PATS = (
    re.compile(r"rn"),
    re.compile(r"Cormp|Hurnan|Hurman|Cormmun|Moverment|Anaysis"),
    re.compile(r"\)"),
    re.compile(r"\s{2,}"),
    re.compile(r"[A-Z]{2}[a-z][A-Z]"),
)


def has_probable_ocr_errors(title: str) -> bool:
    return any(p.search(title) for p in _PROBABLE_ERROR_PATS)
