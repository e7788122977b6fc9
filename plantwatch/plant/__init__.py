"""
Plant Documents
===============

Per-company plant configuration and table/string telemetry:
- models.py: pydantic documents (camelCase on disk)
- operations.py: table creation, panel add/delete, refresh
- store.py: one JSON document per company folder
"""

from .errors import CompanyExistsError, CompanyNotFoundError, PlantError, TableNotFoundError
from .models import PlantDetails, TableRecord
from .operations import add_panels, add_table, create_plant, delete_panel, find_table, refresh
from .store import PlantStore

__all__ = [
    "CompanyExistsError",
    "CompanyNotFoundError",
    "PlantError",
    "TableNotFoundError",
    "PlantDetails",
    "TableRecord",
    "PlantStore",
    "add_panels",
    "add_table",
    "create_plant",
    "delete_panel",
    "find_table",
    "refresh",
]
