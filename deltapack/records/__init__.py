"""Record ingestion, sanitation and dataset comparison for jsondelta."""

from deltapack.records.compare import (
    RECORD_STATUSES,
    DatasetComparison,
    RecordComparison,
    RecordStatus,
    compare_datasets,
    compare_records,
    describe_record,
    status_label,
)
from deltapack.records.dataset import Dataset, Record, parse_dataset, read_dataset
from deltapack.records.exceptions import (
    DatasetFormatError,
    RecordsError,
    SanitationPolicyConfigError,
)
from deltapack.records.sanitize import (
    DEFAULT_SANITATION_POLICY,
    SANITIZE_CONFIG_ENV_VAR,
    SanitationPolicy,
    build_sanitation_policy,
    load_sanitation_policy_from_file,
    sanitation_policy_from_config,
    sanitize_value,
)

__all__ = [
    "DEFAULT_SANITATION_POLICY",
    "RECORD_STATUSES",
    "SANITIZE_CONFIG_ENV_VAR",
    "Dataset",
    "DatasetComparison",
    "DatasetFormatError",
    "Record",
    "RecordComparison",
    "RecordStatus",
    "RecordsError",
    "SanitationPolicy",
    "SanitationPolicyConfigError",
    "build_sanitation_policy",
    "compare_datasets",
    "compare_records",
    "describe_record",
    "load_sanitation_policy_from_file",
    "parse_dataset",
    "read_dataset",
    "sanitation_policy_from_config",
    "sanitize_value",
    "status_label",
]
