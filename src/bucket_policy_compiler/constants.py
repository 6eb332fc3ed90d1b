"""Constants for the Bucket Policy Compiler."""

# Policy document
POLICY_VERSION = "2012-10-17"
DEFAULT_PARTITION = "aws"
WILDCARD = "*"

# Environments
ENVIRONMENTS = ("dev", "staging", "prod", "test")

# Object lock modes
OBJECT_LOCK_MODE_GOVERNANCE = "GOVERNANCE"
OBJECT_LOCK_MODE_COMPLIANCE = "COMPLIANCE"
OBJECT_LOCK_MODES = (OBJECT_LOCK_MODE_GOVERNANCE, OBJECT_LOCK_MODE_COMPLIANCE)

# Statement effects
EFFECT_ALLOW = "Allow"
EFFECT_DENY = "Deny"
EFFECTS = (EFFECT_ALLOW, EFFECT_DENY)

# Principal types
PRINCIPAL_TYPE_AWS = "AWS"

# Naming patterns
BUCKET_NAME_PATTERN = r"^[a-z0-9][a-z0-9-]*[a-z0-9]$"
BUCKET_NAME_MIN_LENGTH = 3
BUCKET_NAME_MAX_LENGTH = 63
KMS_KEY_ARN_PATTERN = (
    r"^arn:(?P<partition>aws(-[a-z]+)*):kms:[a-z0-9-]+:\d{12}:key/"
    r"(mrk-[0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$"
)

# Baseline statement ids
SID_DENY_INSECURE_TRANSPORT = "DenyInsecureTransport"
SID_ALLOW_TRUSTED_PRINCIPALS = "AllowTrustedPrincipals"
SID_DENY_UNENCRYPTED_UPLOADS = "DenyUnencryptedObjectUploads"
SID_DENY_INCORRECT_KEY = "DenyIncorrectEncryptionKey"
SID_CUSTOM_PREFIX = "CustomStatement"
RESERVED_SIDS = (
    SID_DENY_INSECURE_TRANSPORT,
    SID_ALLOW_TRUSTED_PRINCIPALS,
    SID_DENY_UNENCRYPTED_UPLOADS,
    SID_DENY_INCORRECT_KEY,
)

# Actions
ACTION_ALL = "s3:*"
ACTION_PUT_OBJECT = "s3:PutObject"
DEFAULT_TRUSTED_ACTIONS = (
    "s3:GetObject",
    "s3:GetObjectVersion",
    "s3:PutObject",
    "s3:DeleteObject",
    "s3:DeleteObjectVersion",
    "s3:ListBucket",
    "s3:ListBucketVersions",
    "s3:GetBucketLocation",
    "s3:GetObjectTagging",
    "s3:PutObjectTagging",
)

# Condition operators and keys
COND_TEST_BOOL = "Bool"
COND_TEST_STRING_NOT_EQUALS = "StringNotEquals"
COND_TEST_STRING_NOT_EQUALS_IF_EXISTS = "StringNotEqualsIfExists"
COND_KEY_SECURE_TRANSPORT = "aws:SecureTransport"
COND_KEY_SSE = "s3:x-amz-server-side-encryption"
COND_KEY_SSE_KMS_KEY_ID = "s3:x-amz-server-side-encryption-aws-kms-key-id"
SSE_ALGORITHM_KMS = "aws:kms"

# Lifecycle
STORAGE_CLASSES = (
    "STANDARD_IA",
    "ONEZONE_IA",
    "INTELLIGENT_TIERING",
    "GLACIER_IR",
    "GLACIER",
    "DEEP_ARCHIVE",
)

# CORS
CORS_METHODS = ("GET", "PUT", "POST", "DELETE", "HEAD")

# Statement kinds, used as metric labels
KIND_TRANSPORT = "deny_insecure_transport"
KIND_TRUSTED = "allow_trusted_principals"
KIND_UNENCRYPTED = "deny_unencrypted_uploads"
KIND_WRONG_KEY = "deny_incorrect_key"
KIND_CUSTOM = "custom"

# Log fields
CONTROLLER = "bucket-policy-compiler"
