from unittest.mock import MagicMock, patch

import pyarrow.parquet as pq
import pytest

from provider_bookability.models import BookableRecord, NetworkStatus, Via
from provider_bookability.write.parquet_writer import ParquetWriter, write_records


@pytest.fixture(autouse=True)
def no_s3_env(monkeypatch):
    monkeypatch.delenv("S3_BUCKET", raising=False)
    monkeypatch.delenv("S3_PREFIX", raising=False)


def test_parquet_writer(tmp_path):
    local = tmp_path / "test.parquet"
    writer = ParquetWriter(local_path=str(local), batch_size=2)
    writer.write({"a": 1})
    writer.write({"a": 2})
    writer.write({"a": 3})
    writer.close()

    # first batch keeps the requested name, later ones are numbered
    assert writer.written_paths == [str(local), str(tmp_path / "test_0001.parquet")]
    assert sum(pq.read_table(p).num_rows for p in writer.written_paths) == 3


def test_write_records(tmp_path):
    records = [
        BookableRecord(provider_id="A", payer_id="X", via=Via.DIRECT,
                       network_status=NetworkStatus.IN_NETWORK, languages_spoken=("English",)),
        BookableRecord(provider_id="B", payer_id="X", via=Via.SUPERVISED,
                       network_status=NetworkStatus.SUPERVISED, attending_provider_id="A",
                       languages_spoken=("Spanish", "English")),
    ]
    paths = write_records(records, str(tmp_path / "out" / "records.parquet"))

    assert len(paths) == 1
    rows = pq.read_table(paths[0]).to_pylist()
    assert [r["via"] for r in rows] == ["direct", "supervised"]
    assert rows[1]["languages_spoken"] == ["Spanish", "English"]


@patch("provider_bookability.write.parquet_writer.boto3.client")
def test_parquet_writer_uploads_to_s3(mock_client, tmp_path):
    s3 = MagicMock()
    mock_client.return_value = s3

    with ParquetWriter(str(tmp_path / "records.parquet"), batch_size=10,
                       s3_bucket="bucket", s3_prefix="bookability") as writer:
        writer.write({"a": 1})

    s3.upload_file.assert_called_once()
    _, bucket, key = s3.upload_file.call_args[0]
    assert bucket == "bucket"
    assert key == "bookability/records_0000.parquet"
    assert writer.written_paths == ["s3://bucket/bookability/records_0000.parquet"]
    assert writer.failed_uploads == []


@patch("provider_bookability.write.parquet_writer.boto3.client")
def test_parquet_writer_records_failed_upload(mock_client, tmp_path):
    mock_client.return_value = MagicMock()

    with patch.object(ParquetWriter, "_put", side_effect=RuntimeError("denied")):
        writer = ParquetWriter(str(tmp_path / "records.parquet"), s3_bucket="bucket")
        writer.write({"a": 1})
        writer._write_batch()

    assert writer.written_paths == []
    assert len(writer.failed_uploads) == 1
    writer.close()
