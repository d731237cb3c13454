import logging
logger = logging.getLogger(__name__)

from .issues import DiagnosticIssue, DiagnosticIssueLevel
from .issue_codes import DiagnosticIssueCode
from .results import AnomalyReport
from .anomaly import AnomalyDetector

__all__ = [
    "DiagnosticIssue",
    "DiagnosticIssueLevel",
    "DiagnosticIssueCode",
    "AnomalyReport",
    "AnomalyDetector",
]
