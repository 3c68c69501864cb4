from service_reports.parsers.row_parser import RawRow, parse_csv, parse_json, parse_rows

__all__ = [
    "RawRow",
    "parse_csv",
    "parse_json",
    "parse_rows",
]
