"""Throwaway MinIO server for integration tests."""

from __future__ import annotations

import logging
import os
import random
import shutil
import subprocess
import tempfile
import time

from minio_bucket_operator.models import rand_str
from minio_bucket_operator.services.minio import MinioService

logger = logging.getLogger(__name__)


class MinioTestServer:
    """A `minio server` child process backed by a temporary directory."""

    def __init__(self):
        self.storage_dir = tempfile.mkdtemp(prefix="minio-test-")
        self.root_user = rand_str(30)
        self.root_password = rand_str(30)
        self.api_port = 2000 + random.randrange(5000)
        self.process: subprocess.Popen | None = None

    @classmethod
    def start(cls) -> MinioTestServer:
        server = cls()
        logger.info(f"Spawn a new Minio server on port {server.api_port}")
        server.process = subprocess.Popen(
            ["minio", "server", "--address", f":{server.api_port}", server.storage_dir],
            cwd=server.storage_dir,
            env={
                **os.environ,
                "MINIO_ROOT_USER": server.root_user,
                "MINIO_ROOT_PASSWORD": server.root_password,
            },
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

        # Wait for Minio to become ready
        time.sleep(0.5)
        service = server.as_service()
        for _ in range(100):
            time.sleep(0.1)
            if service.is_ready():
                return server

        server.stop()
        raise RuntimeError("Minio failed to respond in time!")

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.api_port}"

    def as_service(self) -> MinioService:
        return MinioService.from_credentials(self.base_url, self.root_user, self.root_password)

    def stop(self) -> None:
        if self.process is not None:
            self.process.kill()
            self.process.wait()
            self.process = None
        shutil.rmtree(self.storage_dir, ignore_errors=True)

    def __enter__(self) -> MinioTestServer:
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
