from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import pandas as pd


class StorageAdapter(ABC):
    """
    Key-addressed storage for the pipeline's input CSVs and outputs.

    Keys are logical, slash-separated paths such as
    "raw/gapminder/income.csv"; implementations map them to a local
    directory or to an S3 bucket/prefix.
    """

    @abstractmethod
    def write_raw(self, key: str, content: bytes) -> str:
        """Store `content` under `key` and return its physical location."""

    @abstractmethod
    def read_raw(self, key: str) -> bytes:
        """Return the bytes stored under `key`."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """True when something is stored under `key`."""

    def read_csv(self, key: str, **read_kwargs: Any) -> pd.DataFrame:
        return pd.read_csv(io.BytesIO(self.read_raw(key)), **read_kwargs)

    def write_csv(self, df: pd.DataFrame, key: str) -> str:
        return self.write_raw(key, df.to_csv(index=False).encode("utf-8"))

    def write_parquet(self, df: pd.DataFrame, key: str) -> str:
        buffer = io.BytesIO()
        df.to_parquet(buffer, index=False)
        return self.write_raw(key, buffer.getvalue())


class LocalStorageAdapter(StorageAdapter):
    """
    Filesystem storage rooted at `root_dir`.

        root_dir = Path("data"), key = "raw/gapminder/income.csv"
        -> data/raw/gapminder/income.csv
    """

    def __init__(self, root_dir: Path | str = ".") -> None:
        self.root_dir = Path(root_dir)

    def path_for(self, key: str) -> Path:
        return self.root_dir / key.lstrip("/")

    def write_raw(self, key: str, content: bytes) -> str:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)

    def read_raw(self, key: str) -> bytes:
        return self.path_for(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()


class S3StorageAdapter(StorageAdapter):
    """S3 storage; keys live under `base_prefix` inside `bucket`."""

    def __init__(
        self,
        bucket: str,
        *,
        base_prefix: Optional[str] = None,
        boto3_client: Optional[Any] = None,
    ) -> None:
        if boto3_client is None:
            import boto3  # only needed when running against S3

            boto3_client = boto3.client("s3")

        self.bucket = bucket
        self.base_prefix = (base_prefix or "").strip("/")
        self._s3 = boto3_client

    def _object_key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.base_prefix}/{key}" if self.base_prefix else key

    def write_raw(self, key: str, content: bytes) -> str:
        object_key = self._object_key(key)
        self._s3.put_object(Bucket=self.bucket, Key=object_key, Body=content)
        return f"s3://{self.bucket}/{object_key}"

    def read_raw(self, key: str) -> bytes:
        resp = self._s3.get_object(Bucket=self.bucket, Key=self._object_key(key))
        return resp["Body"].read()

    def exists(self, key: str) -> bool:
        resp = self._s3.list_objects_v2(
            Bucket=self.bucket,
            Prefix=self._object_key(key),
            MaxKeys=1,
        )
        return any(obj.get("Key") == self._object_key(key) for obj in resp.get("Contents") or [])
