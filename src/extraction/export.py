"""
Profile export.

CSV for spreadsheets (every field quoted) and JSON in the search-link shape
``[{link, name, company, title, synthetic}]``. Placeholder names are flagged
in both formats so they are never mistaken for real people.
"""

import csv
import io
import json
import logging
from typing import Iterable, List

from src.extraction.types import ExtractedProfile

logger = logging.getLogger(__name__)

CSV_HEADER = ["Name", "Company", "Title", "Profile URL", "Location", "Confidence", "Synthetic"]

_TRUE_VALUES = {"true", "yes", "1"}


def profiles_to_csv(profiles: Iterable[ExtractedProfile]) -> str:
    """
    Render profiles as CSV text with a header row.

    Example:
        >>> print(profiles_to_csv([ExtractedProfile(name="Erik", company="Klarna")]).splitlines()[1])
        "Erik","Klarna","","","","0.0","false"
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for profile in profiles:
        writer.writerow([
            profile.name,
            profile.company,
            profile.title,
            profile.url,
            profile.location,
            str(round(profile.confidence, 2)),
            "true" if profile.is_synthetic else "false",
        ])
    return buffer.getvalue()


def parse_profiles_csv(text: str) -> List[ExtractedProfile]:
    """
    Read profiles back from ``profiles_to_csv`` output.

    Files without a Synthetic column are read as real names.

    Raises:
        ValueError: If the header row is missing a required column
    """
    reader = csv.DictReader(io.StringIO(text))
    missing = [column for column in ("Name", "Company", "Title", "Profile URL") if column not in (reader.fieldnames or [])]
    if missing:
        raise ValueError(f"CSV is missing column(s): {', '.join(missing)}")

    profiles = []
    for row in reader:
        try:
            confidence = float(row.get("Confidence") or 0.0)
        except ValueError:
            logger.warning(f"Bad confidence value {row.get('Confidence')!r}, using 0")
            confidence = 0.0
        profiles.append(ExtractedProfile(
            name=row.get("Name") or "",
            company=row.get("Company") or "",
            title=row.get("Title") or "",
            url=row.get("Profile URL") or "",
            location=row.get("Location") or "",
            confidence=confidence,
            is_synthetic=(row.get("Synthetic") or "").strip().lower() in _TRUE_VALUES,
        ))
    return profiles


def profiles_to_json(profiles: Iterable[ExtractedProfile], indent: int = 2) -> str:
    """Render profiles as a JSON array of ``{link, name, company, title, synthetic}``."""
    payload = [
        {
            "link": profile.url,
            "name": profile.name,
            "company": profile.company,
            "title": profile.title,
            "synthetic": profile.is_synthetic,
        }
        for profile in profiles
    ]
    return json.dumps(payload, ensure_ascii=False, indent=indent)
