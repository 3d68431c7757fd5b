"""Module for writing bookability records to parquet with optional S3 upload."""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import boto3
import pyarrow as pa
import pyarrow.parquet as pq

from ..models import BookableRecord
from ..utils.backoff_logger import get_logger, with_retry

logger = get_logger(__name__)


class ParquetWriter:
    """Buffers record dicts and writes them in parquet batches."""

    def __init__(self,
                 local_path: str,
                 batch_size: int = 1000,
                 s3_bucket: Optional[str] = None,
                 s3_prefix: Optional[str] = None):
        """Initialize writer.

        Args:
            local_path: Local output path (or temp file stem if uploading)
            batch_size: Number of records per batch
            s3_bucket: S3 bucket name (if None, uses local storage only)
            s3_prefix: S3 prefix/folder path
        """
        self.output_path = Path(local_path)
        self.batch_size = batch_size
        self.records: List[Dict[str, Any]] = []
        self.file_counter = 0
        self.written_paths: List[str] = []
        self.failed_uploads: List[str] = []

        self.s3_bucket = s3_bucket or os.getenv("S3_BUCKET")
        self.s3_prefix = s3_prefix or os.getenv("S3_PREFIX", "bookability")
        self.s3_client = boto3.client("s3") if self.s3_bucket else None

        if self.s3_client:
            self.temp_dir = tempfile.mkdtemp(prefix="bookability_writer_")
            logger.info("created_temp_dir", temp_dir=self.temp_dir)
        else:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.temp_dir = None

    def write(self, record: Dict[str, Any]):
        """Write a single record dict."""
        self.records.append(record)
        if len(self.records) >= self.batch_size:
            self._write_batch()

    def write_record(self, record: BookableRecord):
        self.write(record.to_dict())

    def close(self):
        """Write remaining records and clean up."""
        if self.records:
            self._write_batch()
        if self.temp_dir:
            shutil.rmtree(self.temp_dir, ignore_errors=True)
            logger.info("cleaned_temp_dir", temp_dir=self.temp_dir)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _batch_path(self) -> Path:
        if self.s3_client:
            return Path(self.temp_dir) / f"{self.output_path.stem}_{self.file_counter:04d}.parquet"
        if self.file_counter == 0:
            return self.output_path
        stem = self.output_path.stem
        suffix = self.output_path.suffix
        return self.output_path.parent / f"{stem}_{self.file_counter:04d}{suffix}"

    def _write_batch(self):
        if not self.records:
            return
        local_path = self._batch_path()
        table = pa.Table.from_pylist(self.records)
        pq.write_table(table, local_path)
        logger.info("wrote_local_batch", path=str(local_path), records=len(self.records))

        if self.s3_client:
            if self._upload_to_s3(local_path):
                local_path.unlink()
            else:
                self.failed_uploads.append(str(local_path))
                logger.error("keeping_temp_file_due_to_upload_failure", path=str(local_path))
        else:
            self.written_paths.append(str(local_path))

        self.records = []
        self.file_counter += 1

    def _upload_to_s3(self, local_path: Path) -> bool:
        """Upload one batch file; returns False instead of raising."""
        s3_key = f"{self.s3_prefix}/{local_path.name}"
        try:
            self._put(local_path, s3_key)
        except Exception as e:
            logger.error("s3_upload_failed",
                         local_path=str(local_path),
                         s3_bucket=self.s3_bucket,
                         error=str(e))
            return False
        self.written_paths.append(f"s3://{self.s3_bucket}/{s3_key}")
        logger.info("uploaded_to_s3", s3_bucket=self.s3_bucket, s3_key=s3_key)
        return True

    @with_retry
    def _put(self, local_path: Path, s3_key: str):
        self.s3_client.upload_file(str(local_path), self.s3_bucket, s3_key)


def write_records(records: Iterable[BookableRecord], path: str, batch_size: int = 5000,
                  s3_bucket: Optional[str] = None, s3_prefix: Optional[str] = None) -> List[str]:
    """Write normalized records in one go and return where they landed."""
    writer = ParquetWriter(path, batch_size=batch_size, s3_bucket=s3_bucket, s3_prefix=s3_prefix)
    with writer:
        for record in records:
            writer.write_record(record)
    return writer.written_paths
