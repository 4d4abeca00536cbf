from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["critical", "high", "medium", "low", "info"]
Category = Literal["performance", "seo", "mobile", "schema", "links", "accessibility", "security"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuditIssue(_CamelModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: Category
    title: str
    description: str
    recommendation: str
    url: str
    evidence: dict[str, Any] = Field(default_factory=dict)


class ScanStats(_CamelModel):
    model_config = ConfigDict(frozen=True)

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    total_checks: int
    passed_checks: int


class ScanMeta(_CamelModel):
    model_config = ConfigDict(frozen=True)

    response_time_ms: int = 0
    http_status: int = 0
    redirects: bool = False
    ssl: bool = False


class ScanResult(_CamelModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    scanned_at: datetime
    score: int = Field(ge=0, le=100)
    issues: tuple[AuditIssue, ...]
    stats: ScanStats
    meta: ScanMeta


# --- API models ---

class ScanRequest(BaseModel):
    url: str = Field(min_length=1)


class AuditScanRequest(_CamelModel):
    client_id: str = Field(min_length=1)


class AuditScanData(_CamelModel):
    scan_job_id: Optional[str]
    domain: str
    score: int
    scanned_at: datetime
    stats: ScanStats
    meta: ScanMeta
    issues: list[AuditIssue]


class AuditScanResponse(BaseModel):
    success: bool
    data: AuditScanData


class ClientScanSummary(_CamelModel):
    client_id: str
    domain: str
    score: int = 0
    issues_found: int = 0
    scan_job_id: Optional[str] = None
    status: Literal["success", "error"]
    error: Optional[str] = None
    duration_ms: int = 0


class BatchSummary(_CamelModel):
    scanned_at: datetime
    total_clients: int
    successful: int
    failed: int
    average_score: int
    total_duration_ms: int
    results: list[ClientScanSummary]


class CronResponse(BaseModel):
    success: bool
    data: BatchSummary


class AuditResultsData(_CamelModel):
    client_id: str
    score: Optional[int]
    last_scanned_at: Optional[str]
    counts: dict[str, int]
    issues: list[dict[str, Any]]


class AuditResultsResponse(BaseModel):
    success: bool
    data: AuditResultsData
