from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

TRUE_WORDS = {"1", "true", "yes", "y", "si", "x"}


# One catalog row, as read from disk. Values are loosely typed here;
# services/catalog.py validates them when the row is inserted.
@dataclass(frozen=True)
class CatalogSubject:
    program_id: str
    id: str
    name: str
    year: int | None = None
    term: str = "annual"
    hours: float = 0.0
    credits: float = 0.0
    is_elective: bool = False
    requirements: list[dict] = field(default_factory=list)

    program_name: str | None = None
    university: str | None = None


def normalize_text(s) -> str:
    s = str(s or "").strip()
    s = re.sub(r"\s+", " ", s)
    return s


def parse_requirements(text: str | None) -> list[dict]:
    """``"MAT1;FIS1:final_pending"`` -> ``[{"id": "MAT1"}, {"id": "FIS1", "minStatus": "final_pending"}]``"""
    out: list[dict] = []
    for part in (text or "").split(";"):
        part = part.strip()
        if not part:
            continue
        rid, _, min_status = part.partition(":")
        item = {"id": rid.strip()}
        if min_status.strip():
            item["minStatus"] = min_status.strip()
        out.append(item)
    return out


def _to_int(v) -> int | None:
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return None
    s = normalize_text(v)
    if not s:
        return None
    try:
        return int(float(s))
    except ValueError:
        return None


def _to_float(v) -> float:
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return 0.0
    s = normalize_text(v).replace(",", ".")
    try:
        return float(s) if s else 0.0
    except ValueError:
        return 0.0


def _to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return False
    return normalize_text(v).lower() in TRUE_WORDS


def _to_text(v) -> str | None:
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return None
    s = normalize_text(v)
    return s or None


def row_to_subject(row: dict) -> CatalogSubject | None:
    program_id = _to_text(row.get("program_id"))
    subject_id = _to_text(row.get("id"))
    name = _to_text(row.get("name"))
    if not program_id or not subject_id or not name:
        return None

    return CatalogSubject(
        program_id=program_id,
        id=subject_id,
        name=name,
        year=_to_int(row.get("year")),
        term=(_to_text(row.get("term")) or "annual").lower(),
        hours=_to_float(row.get("hours")),
        credits=_to_float(row.get("credits")),
        is_elective=_to_bool(row.get("is_elective")),
        requirements=parse_requirements(_to_text(row.get("requirements"))),
        program_name=_to_text(row.get("program_name")),
        university=_to_text(row.get("university")),
    )


def load_catalog(directory: str) -> list[CatalogSubject]:
    p = Path(directory)
    if not p.exists() or not p.is_dir():
        logger.warning("catalog directory %s not found", directory)
        return []

    items: list[CatalogSubject] = []

    for f in sorted(p.glob("*.xlsx")):
        try:
            items.extend(_load_xlsx_catalog(f))
        except Exception as e:  # openpyxl raises a zoo of types on bad files
            logger.warning("skipping unreadable catalog %s: %s", f.name, e)

    for f in sorted(p.glob("*.csv")):
        try:
            items.extend(_load_csv_catalog(f))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            logger.warning("skipping unreadable catalog %s: %s", f.name, e)

    # later files win on repeated ids
    uniq = {c.id: c for c in items}
    out = list(uniq.values())
    out.sort(key=lambda c: (c.program_id, c.year is None, c.year or 0, c.id))
    return out


def _load_csv_catalog(f: Path) -> list[CatalogSubject]:
    items: list[CatalogSubject] = []
    with f.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            subject = row_to_subject({(k or "").strip().lower(): v for k, v in row.items()})
            if subject is not None:
                items.append(subject)
    return items


def _load_xlsx_catalog(f: Path) -> list[CatalogSubject]:
    df = pd.read_excel(f)
    df.columns = [str(c).strip().lower() for c in df.columns]

    items: list[CatalogSubject] = []
    for _, r in df.iterrows():
        subject = row_to_subject(r.to_dict())
        if subject is not None:
            items.append(subject)
    return items
