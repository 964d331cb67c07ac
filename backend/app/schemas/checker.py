"""
Checker schemas — observations pushed by the external checker and manual
bulk-check requests.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ScanResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[str] = None
    blocked_id: Optional[Union[str, int]] = Field(None, alias="blockedId")


class StatusObservation(BaseModel):
    """{"id": ..., "scanResult": {"status": "blocked" | anything else}}"""
    id: Optional[str] = None
    scanResult: Optional[ScanResult] = None

    def to_entry(self) -> Dict[str, Any]:
        scan = self.scanResult or ScanResult()
        marker = None if scan.blocked_id is None else str(scan.blocked_id)
        return {"id": self.id, "status": scan.status, "marker": marker}


class BulkStatusRequest(BaseModel):
    updates: List[StatusObservation] = Field(default_factory=list)


class CheckerTarget(BaseModel):
    id: str
    brand: str
    domain: str
    note: str = ""


class CheckerTargetsResponse(BaseModel):
    success: bool = True
    count: int
    data: List[CheckerTarget]


class BulkCheckRequest(BaseModel):
    urls: List[str] = Field(..., min_length=1)
    mode: str = "official"
