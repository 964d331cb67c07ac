"""
Pydantic schemas for bulk domain import.

Two input methods, exactly one per request:
- domains:  list of {domain, brand, note?}
- csv_text: CSV with a header row (domain, brand, optional note)

Examples:
    {"domains": [{"domain": "example.com", "brand": "A200M"}]}

    {"csv_text": "Domain,Brand,Note\\nexample.com,A200M,promo"}
"""
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from app.core.config import settings

MAX_BULK_IMPORT_SIZE = settings.max_bulk_import_size


class ImportRow(BaseModel):
    domain: Optional[str] = ""
    brand: Optional[str] = ""
    note: Optional[str] = ""


class BulkImportRequest(BaseModel):
    domains: Optional[List[ImportRow]] = Field(
        None,
        description="Rows to import"
    )
    csv_text: Optional[str] = Field(
        None,
        description="CSV text with a header row (alternative to domains)"
    )

    @model_validator(mode='after')
    def check_single_source(self) -> 'BulkImportRequest':
        if self.domains is not None and self.csv_text is not None:
            raise ValueError("Provide either domains or csv_text, not both")
        if self.domains is None and self.csv_text is None:
            raise ValueError("Provide domains or csv_text")
        if self.domains is not None and len(self.domains) > MAX_BULK_IMPORT_SIZE:
            raise ValueError(f"Maximum {MAX_BULK_IMPORT_SIZE} domains per import")
        return self


class ImportSuccess(BaseModel):
    row: int
    domain: str
    brand: str


class ImportFailure(BaseModel):
    row: int
    domain: str
    error: str


class ImportSkip(BaseModel):
    row: int
    domain: str
    reason: str


class ImportOutcome(BaseModel):
    success: List[ImportSuccess]
    failed: List[ImportFailure]
    skipped: List[ImportSkip]


class BulkImportResponse(BaseModel):
    success: bool = True
    message: str
    data: ImportOutcome

    @classmethod
    def from_outcome(cls, outcome: Any) -> 'BulkImportResponse':
        return cls(
            message=(
                f"Import completed: {len(outcome['success'])} success, "
                f"{len(outcome['failed'])} failed, {len(outcome['skipped'])} skipped"
            ),
            data=ImportOutcome(**outcome),
        )
