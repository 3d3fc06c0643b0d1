from .csv_parser import ParsedTable, Record, load_csv_text, parse_csv

__all__ = ["ParsedTable", "Record", "load_csv_text", "parse_csv"]
