import os
import csv
from datetime import date, datetime
from typing import List

from .client import open_spreadsheet


def _ensure_dir(path: str):
    os.makedirs(path, exist_ok=True)


def _is_hidden(ws) -> bool:
    props = getattr(ws, "_properties", {}) or {}
    return bool(props.get("hidden", False))


def download_snapshot(sheet_link: str, label: str) -> List[str]:
    """Save every visible worksheet as CSV under data/samples/<label>/."""
    sh = open_spreadsheet(sheet_link)
    saved: List[str] = []
    dest_root = os.path.join("data", "samples", label)
    _ensure_dir(dest_root)
    for ws in sh.worksheets():
        if _is_hidden(ws):
            continue
        rows = ws.get_all_values()
        dest_path = os.path.join(dest_root, f"{ws.title}.csv")
        with open(dest_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            for r in rows:
                writer.writerow(r)
        saved.append(dest_path)
    print(f"[SHEETS] Saved {len(saved)} worksheets to {dest_root}")
    return saved


def _cell_text(value) -> str:
    if value is None:
        return ""
    # Excel date cells come back as datetimes
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def load_xlsx_rows(xlsx_path: str, worksheet_title: str | None = None) -> List[List[str]]:
    from openpyxl import load_workbook

    wb = load_workbook(filename=xlsx_path, data_only=True, read_only=True)
    try:
        ws = wb[worksheet_title] if worksheet_title and worksheet_title in wb.sheetnames else wb.active
        return [[_cell_text(c) for c in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def load_csv_rows(csv_path: str) -> List[List[str]]:
    with open(csv_path, encoding="utf-8", newline="") as f:
        return [row for row in csv.reader(f)]


def load_snapshot_rows(path: str, worksheet_title: str | None = None) -> List[List[str]]:
    """Rows of an offline reservations snapshot (.xlsx or CSV)."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Snapshot not found: {path}")
    if path.lower().endswith((".xlsx", ".xlsm")):
        return load_xlsx_rows(path, worksheet_title)
    return load_csv_rows(path)
