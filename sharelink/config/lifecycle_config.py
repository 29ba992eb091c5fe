"""
Lifecycle Configuration

Environment-driven settings for storage backends and lifecycle policy.
"""

import os


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class LifecycleConfig:
    """Lifecycle configuration settings."""

    def __init__(self):
        # Storage backends
        self.link_backend = os.getenv("LINK_BACKEND", "redis").lower()
        self.blob_backend = os.getenv("BLOB_BACKEND", "local").lower()
        self.blob_storage_dir = os.getenv("BLOB_STORAGE_DIR", "/tmp/sharelink")
        blob_capacity = os.getenv("BLOB_CAPACITY_BYTES")
        self.blob_capacity_bytes = int(blob_capacity) if blob_capacity else None

        # Link policy
        self.max_code_attempts = int(os.getenv("MAX_CODE_ATTEMPTS", 10))
        self.password_hash_iterations = int(os.getenv("PASSWORD_HASH_ITERATIONS", 200_000))
        self.secret_key = os.getenv("SECRET_KEY")
        self.access_grant_ttl_seconds = int(os.getenv("ACCESS_GRANT_TTL_SECONDS", 300))

        # Reaping
        self.orphan_grace_seconds = int(os.getenv("ORPHAN_GRACE_SECONDS", 300))
        self.reap_on_startup = _env_bool("REAP_ON_STARTUP", "true")
        self.reap_interval_seconds = float(os.getenv("REAP_INTERVAL_SECONDS", 300))

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
