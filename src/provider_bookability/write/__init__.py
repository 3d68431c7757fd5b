from .parquet_writer import ParquetWriter, write_records

__all__ = ["ParquetWriter", "write_records"]
