from __future__ import annotations

import re

# Row-leading words that never start a subject row: table headers, section
# labels, footers, and the words elective/summer rows wrap onto.
HEADER_ROW_PAT = re.compile(
    r"^(?:Total|YEAR|Semester|First|Second|Third|Fourth|Summer|Course|Descriptive|Lec|Lab|Units|"
    r"Grade|Rating|Rem\.|REVISION|PROFESSIONAL|ELECTIVES|Complexity|Computational|Compiler|Robotic|"
    r"Parallel|Computer|Distributed|Mobile|Network|Data|Living|Great|Books|Environmental|"
    r"Entrepreneurial|Systems|Performance|Analysis|Design|Construction|Vision|Visualization|Graphics|"
    r"Modelling|Monitoring|NO\.|OF|Science|Technology|Society|Agham|Teknolohiya|Lipunan|Ethics|"
    r"Appreciatier|Pagpapatalaga|Sining|Issues|Practice|Works|Rizal|Era|Human|Reproduction|Mind)$",
    re.IGNORECASE,
)

# A following row that opens with one of these is a new section, not a wrapped title.
SECTION_START_PAT = re.compile(r"^(?:Total|YEAR|First|Second|Summer)", re.IGNORECASE)

SINGLE_LETTER_PAT = re.compile(r"^[A-Z]$", re.IGNORECASE)
# Course number that may follow a lone letter artifact ("C 104" read from "CS 104").
ARTIFACT_NUMBER_PAT = re.compile(r"^[01]\d+$")
PREFIX_PAT = re.compile(r"^[A-Z]{2,10}$", re.IGNORECASE)
COURSE_NUMBER_PAT = re.compile(r"^[01]?\d+$")
ELEC_KEYWORD_PAT = re.compile(r"^Elec(?:tive)?$", re.IGNORECASE)
DIGITS_PAT = re.compile(r"^\d+$")

# Rejected even though they look like a course prefix.
NON_SUBJECT_PREFIXES = frozenset({"TOTAL", "YEAR"})

# Tokens dropped while assembling a title.
TITLE_FILLER_PAT = re.compile(r"^(?:Total|Grade|Rating|Rem\.|O\.H|Elec|OA|CS|APAM|J)$", re.IGNORECASE)
TITLE_JUNK_CHARS_PAT = re.compile(r"[|_]")

MAX_SMALL_UNIT = 5
MAX_TITLE_LEN = 200
FALLBACK_TITLE = "Subject"
