from .tabular_writer import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE, read_csv_rows, write_csv, write_xlsx

__all__ = ["CSV_MEDIA_TYPE", "XLSX_MEDIA_TYPE", "read_csv_rows", "write_csv", "write_xlsx"]
