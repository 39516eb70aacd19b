"""trialspace package exports."""

from .distributions import StandardSpace
from .domain import Domain, normalize_result, run_trial
from .errors import (
    ConfigError,
    ExpKeyMismatchError,
    IncompleteResultError,
    InvalidReturnError,
    InvalidStatusError,
    InvalidTrialError,
    MissingTrialFieldError,
    ReportingError,
    ResultContractError,
    TrialSpaceError,
)
from .results import (
    JOB_STATES,
    STATUS_FAIL,
    STATUS_NEW,
    STATUS_OK,
    STATUS_RUNNING,
    STATUS_STRINGS,
    STATUS_SUSPENDED,
    TRIAL_KEYS,
    JobState,
    Result,
    ResultStatus,
)
from .space import CapabilityRegistry, SampleSpace, capability
from .trials import Trials, build_trial_doc

__all__ = [
    "CapabilityRegistry",
    "ConfigError",
    "Domain",
    "ExpKeyMismatchError",
    "IncompleteResultError",
    "InvalidReturnError",
    "InvalidStatusError",
    "InvalidTrialError",
    "JOB_STATES",
    "JobState",
    "MissingTrialFieldError",
    "ReportingError",
    "Result",
    "ResultContractError",
    "ResultStatus",
    "STATUS_FAIL",
    "STATUS_NEW",
    "STATUS_OK",
    "STATUS_RUNNING",
    "STATUS_STRINGS",
    "STATUS_SUSPENDED",
    "SampleSpace",
    "StandardSpace",
    "TRIAL_KEYS",
    "TrialSpaceError",
    "Trials",
    "build_trial_doc",
    "capability",
    "normalize_result",
    "run_trial",
]
