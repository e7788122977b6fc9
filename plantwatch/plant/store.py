"""
Plant File Store
================

One folder per company under a root directory, each holding a
plant_details.json document. Writes replace the whole document atomically.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from pydantic import ValidationError

from .errors import CompanyExistsError, CompanyNotFoundError
from .models import PlantDetails

logger = logging.getLogger(__name__)

PLANT_FILE = "plant_details.json"


class PlantStore:
    """JSON-file persistence for plant documents."""

    def __init__(self, root: str | Path = "companies"):
        self.root = Path(root)

    def company_dir(self, company_id: str) -> Path:
        if not company_id or Path(company_id).name != company_id or company_id in (".", ".."):
            raise ValueError(f"Invalid company id: {company_id!r}")
        return self.root / company_id

    def plant_path(self, company_id: str) -> Path:
        return self.company_dir(company_id) / PLANT_FILE

    def exists(self, company_id: str) -> bool:
        return self.plant_path(company_id).exists()

    def create(self, details: PlantDetails) -> Path:
        if self.exists(details.company_id):
            raise CompanyExistsError(details.company_id)
        self.company_dir(details.company_id).mkdir(parents=True, exist_ok=True)
        path = self.save(details)
        logger.info("Created company %s at %s", details.company_id, path.parent)
        return path

    def load(self, company_id: str) -> PlantDetails:
        path = self.plant_path(company_id)
        if not path.exists():
            raise CompanyNotFoundError(company_id)
        return PlantDetails.model_validate(json.loads(path.read_text()))

    def save(self, details: PlantDetails) -> Path:
        path = self.plant_path(details.company_id)
        if not path.parent.exists():
            raise CompanyNotFoundError(details.company_id)

        fd, tmp = tempfile.mkstemp(prefix=".plant_details.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w") as f:
                f.write(details.to_json())
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Saved %s", path)
        return path

    def delete(self, company_id: str) -> None:
        path = self.company_dir(company_id)
        if not path.exists():
            raise CompanyNotFoundError(company_id)
        shutil.rmtree(path)
        logger.info("Deleted company %s", company_id)

    def list_companies(self) -> List[PlantDetails]:
        """All readable plant documents; broken company folders are skipped."""
        if not self.root.exists():
            return []
        companies = []
        for entry in sorted(self.root.iterdir()):
            if not entry.is_dir():
                continue
            try:
                companies.append(self.load(entry.name))
            except (CompanyNotFoundError, json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping company %s: %s", entry.name, e)
        return companies
