"""
Disease catalog - map condition codes to tracked disease keys.
"""
from sqlalchemy.orm import Session
from synthstats.config import settings
from synthstats.models.disease import Disease
from synthstats.schemas.resources import Condition
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


class DiseaseCatalog:
    """Read-only SNOMED code -> disease key mapping."""

    def __init__(self, mapping: Dict[str, str], code_system: str = None):
        self._mapping = dict(mapping)
        self.code_system = code_system or settings.SNOMED_CODE_SYSTEM

    @classmethod
    def from_session(cls, db: Session, code_system: str = None) -> "DiseaseCatalog":
        """Load the disease mapping from the database."""
        rows = db.query(Disease.code_snomed, Disease.disease_fp).all()
        logger.info(f"Loaded {len(rows)} tracked diseases")
        return cls({r.code_snomed: r.disease_fp for r in rows}, code_system=code_system)

    def condition_code(self, condition: Condition) -> str:
        """Return the condition's code in the catalog's coding system, or ''."""
        if condition.code is None:
            return ""
        for coding in condition.code.coding:
            if coding.system == self.code_system:
                return coding.code
        return ""

    def disease_for_code(self, code: str) -> Optional[str]:
        if not code:
            return None
        return self._mapping.get(code)

    def disease_for_condition(self, condition: Condition) -> Optional[str]:
        return self.disease_for_code(self.condition_code(condition))

    def __len__(self) -> int:
        return len(self._mapping)
