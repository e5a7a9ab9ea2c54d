"""Builder for the access policy of a bucket user."""

from __future__ import annotations

import json
from typing import Any


def build_bucket_policy(bucket_name: str) -> dict[str, Any]:
    """Policy granting full access to one bucket and its objects."""
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Action": ["s3:*"],
                "Resource": [
                    f"arn:aws:s3:::{bucket_name}",
                    f"arn:aws:s3:::{bucket_name}/*",
                ],
            }
        ],
    }


def render_bucket_policy(bucket_name: str) -> str:
    return json.dumps(build_bucket_policy(bucket_name), indent=2)
