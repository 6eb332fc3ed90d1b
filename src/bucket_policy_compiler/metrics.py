"""Prometheus metrics for the Bucket Policy Compiler."""

from prometheus_client import Counter, Histogram

# Compilation metrics
compile_total = Counter(
    "bucket_policy_compiler_compile_total",
    "Total number of compilations",
    ["result"],
)

compile_duration_seconds = Histogram(
    "bucket_policy_compiler_compile_duration_seconds",
    "Duration of compilations in seconds",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)

# Validation metrics
validation_errors_total = Counter(
    "bucket_policy_compiler_validation_errors_total",
    "Total number of field validation errors",
    ["field"],
)

# Composition metrics
statements_emitted_total = Counter(
    "bucket_policy_compiler_statements_emitted_total",
    "Total number of policy statements emitted",
    ["kind"],
)

# Provisioning collaborator metrics
apply_operations_total = Counter(
    "bucket_policy_compiler_apply_operations_total",
    "Total number of S3 operations performed while applying artifacts",
    ["operation", "result"],
)
