"""Constants for the MinIO Bucket Operator."""

# API Group
API_GROUP = "communiquons.org"
API_VERSION = "v1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_INSTANCE = "MinioInstance"
KIND_BUCKET = "MinioBucket"

# Plurals
PLURAL_INSTANCES = "minioinstances"
PLURAL_BUCKETS = "miniobuckets"

# Labels
LABEL_CREATED_BY = "created-by"
CREATED_BY_VALUE = "minio-bucket-operator"

# Instance credentials secret keys
SECRET_INSTANCE_ACCESS_KEY = "accessKey"
SECRET_INSTANCE_SECRET_KEY = "secretKey"

# Bucket user secret keys
SECRET_BUCKET_ACCESS_KEY = "accessKey"
SECRET_BUCKET_SECRET_KEY = "secretKey"

# Generated bucket user credentials length
SECRET_BUCKET_ACCESS_LEN = 20
SECRET_BUCKET_SECRET_LEN = 35

# mc client
MC_EXE = "mc"
MC_ALIAS_NAME = "managedminioinst"
MC_DEFAULT_TIMEOUT_SECONDS = 120

# Policies
POLICY_NAME_PREFIX = "bucket-"

# Condition Types
COND_READY = "Ready"
COND_INSTANCE_NOT_READY = "InstanceNotReady"
COND_CREATION_FAILED = "CreationFailed"
COND_APPLY_FAILED = "ApplyFailed"

# Event Reasons
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_BUCKET_APPLIED = "BucketApplied"
EVENT_REASON_CREDENTIALS_CREATED = "CredentialsCreated"
EVENT_REASON_DRIFT_DETECTED = "DriftDetected"
