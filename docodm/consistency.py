from enum import Enum
from typing import Optional


class ScanConsistency(str, Enum):
    NOT_BOUNDED = "not_bounded"
    REQUEST_PLUS = "request_plus"


def resolve_consistency(*candidates: Optional[ScanConsistency], default: ScanConsistency) -> ScanConsistency:
    for candidate in candidates:
        if candidate is not None:
            return ScanConsistency(candidate)
    return default
