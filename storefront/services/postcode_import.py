"""
Bulk import of delivery prices from CSV chunk files.

Each file has ``Postcode``, ``Economy`` and ``Premium`` columns. Valid rows
are upserted in one bulk write per file; invalid rows are written next to the
import as ``invalid_<file name>.json`` for later inspection.
"""

import csv
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from storefront.core.exceptions import DatabaseError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.delivery import Postcode
from storefront.infrastructure.repositories.postcode_repository import PostcodeRepository

logger = get_logger(__name__)


@dataclass
class FileImportResult:
    file_name: str
    imported: int = 0
    invalid: int = 0
    error: Optional[str] = None


@dataclass
class ImportSummary:
    files: List[FileImportResult] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return sum(f.imported for f in self.files)

    @property
    def invalid(self) -> int:
        return sum(f.invalid for f in self.files)

    @property
    def failed(self) -> List[FileImportResult]:
        return [f for f in self.files if f.error]


def _price(raw: Optional[str]) -> Optional[float]:
    try:
        value = float((raw or "").strip())
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value


def parse_rows(rows) -> Tuple[List[Postcode], List[Dict[str, str]]]:
    """
    Split CSV rows into valid postcodes and invalid raw rows.

    A row is invalid when its postcode is blank or a price is not a
    non-negative number.
    """
    valid, invalid = [], []
    for row in rows:
        postcode = (row.get("Postcode") or "").strip()
        economy = _price(row.get("Economy"))
        premium = _price(row.get("Premium"))
        if not postcode or economy is None or premium is None:
            invalid.append(dict(row))
            continue
        valid.append(Postcode(postcode=Postcode.normalize(postcode), economy_price=economy, premium_price=premium))
    return valid, invalid


class PostcodeImporter:
    """Imports every ``*.csv`` file of a folder, in name order."""

    def __init__(self, repository: PostcodeRepository, output_dir: Optional[Path] = None):
        self.repository = repository
        self.output_dir = output_dir or Path.cwd()

    def import_file(self, path: Path) -> FileImportResult:
        logger.info(f"Importing {path}")
        result = FileImportResult(file_name=path.name)

        with path.open(newline="", encoding="utf-8-sig") as handle:
            valid, invalid = parse_rows(csv.DictReader(handle))

        if invalid:
            result.invalid = len(invalid)
            invalid_path = self.output_dir / f"invalid_{path.name}.json"
            invalid_path.write_text(json.dumps(invalid, indent=2), encoding="utf-8")
            logger.warning(f"{len(invalid)} invalid rows found in {path.name}", extra={"report": str(invalid_path)})

        if not valid:
            logger.warning(f"No valid rows found in {path.name}")
            return result

        self.repository.bulk_upsert(valid)
        result.imported = len(valid)
        logger.info(f"Imported {len(valid)} rows from {path.name}")
        return result

    def import_folder(self, folder: Path) -> ImportSummary:
        """
        Import all CSV files of ``folder``.

        A file that fails to import is logged and skipped.
        """
        summary = ImportSummary()
        for path in sorted(folder.glob("*.csv")):
            try:
                summary.files.append(self.import_file(path))
            except (OSError, csv.Error, UnicodeDecodeError, RepositoryError, DatabaseError) as e:
                logger.error(f"Failed importing {path.name}: {str(e)}")
                summary.files.append(FileImportResult(file_name=path.name, error=str(e)))
        return summary
