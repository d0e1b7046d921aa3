from content_scanner.schemas.scan import (
    AnalyzeTextRequest,
    BatchScanRequest,
    BatchScanResponse,
    ErrorBody,
    ErrorResponse,
    ScanResponse,
    ScanResult,
    ScanUrlRequest,
    TextResponse,
    TextResult,
)

__all__ = [
    "AnalyzeTextRequest",
    "BatchScanRequest",
    "BatchScanResponse",
    "ErrorBody",
    "ErrorResponse",
    "ScanResponse",
    "ScanResult",
    "ScanUrlRequest",
    "TextResponse",
    "TextResult",
]
