"""
Pay data output writers
JSON keeps the nested record shape; .xls/.xlsx get an HTML table that
spreadsheet tools open directly
"""
import html
import json
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from config.extraction_config import EXTRACTION_CONFIG
from models import PayData

logger = logging.getLogger(__name__)

# Column label -> (section, field)
FLAT_COLUMNS = [
    ("Check Number", "check", "check_number"),
    ("Check Date", "check", "check_date"),
    ("Pay Period Start", "check", "pay_period_start"),
    ("Pay Period End", "check", "pay_period_end"),
    ("Salary", "check", "salary"),
    ("Net Pay", "check", "net_pay"),
    ("Federal Taxable Income", "check", "fed_tax_income"),
    ("Hours Worked", "check", "hours_worked"),
    ("Gross Earnings Hours", "gross_earnings", "hours"),
    ("Gross Earnings Period", "gross_earnings", "period"),
    ("Gross Earnings YTD", "gross_earnings", "ytd"),
    ("Taxes Period", "taxes", "period"),
    ("Taxes YTD", "taxes", "ytd"),
    ("Deductions Period", "deductions", "period"),
    ("Deductions YTD", "deductions", "ytd"),
    ("Total Direct Deposits", "deposits", "total"),
    ("Regular Hourly Rate", "gross_earnings", "regular_rate"),
]

CHECK_DATE_FORMATS = ["%B %d, %Y", "%b %d, %Y", "%m/%d/%Y", "%Y-%m-%d"]


def parse_check_date(value: str) -> Optional[datetime]:
    for fmt in CHECK_DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def flatten_pay_data(pay_data: PayData) -> Dict[str, str]:
    """One spreadsheet row per pay stub"""
    return {
        label: getattr(getattr(pay_data, section), field) or ""
        for label, section, field in FLAT_COLUMNS
    }


def prepare_table_data(records: Sequence[PayData]) -> List[Dict[str, str]]:
    """Flattened rows, newest check date first; undated rows last"""
    rows = [flatten_pay_data(record) for record in records]
    dated = [(parse_check_date(row["Check Date"]), row) for row in rows]
    dated.sort(key=lambda item: item[0] or datetime.min, reverse=True)
    return [row for _, row in dated]


def generate_html_table(records: Sequence[PayData]) -> str:
    rows = prepare_table_data(records)
    headers = "".join(f"<th>{html.escape(label)}</th>" for label, _, _ in FLAT_COLUMNS)
    body = "\n".join(
        "<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>"
        for row in rows
    )
    return (
        "<html>\n<head>\n<meta charset=\"utf-8\">\n</head>\n<body>\n<table>\n"
        f"<thead>\n<tr>{headers}</tr>\n</thead>\n<tbody>\n{body}\n</tbody>\n"
        "</table>\n</body>\n</html>\n"
    )


def generate_json(records: Sequence[PayData]) -> str:
    return json.dumps([record.model_dump(by_alias=True) for record in records], indent=2)


def get_output_path(output_file: str, directory: str) -> str:
    """A bare file name is placed in directory; anything with a directory part is kept"""
    if not output_file:
        raise ValueError("Output file is not specified.")
    if os.path.dirname(output_file):
        return output_file
    return os.path.join(directory, output_file)


def write_pay_data(records: Sequence[PayData], output_path: str, config: Optional[Dict] = None) -> str:
    """
    Write pay data records, replacing any existing file

    Args:
        records: extracted pay data
        output_path: .json, .xls or .xlsx file
        config: configuration dict (uses EXTRACTION_CONFIG if not provided)

    Returns:
        The path written

    Raises:
        ValueError: unsupported output extension
    """
    config = config or EXTRACTION_CONFIG
    ext = os.path.splitext(output_path)[1].lower()
    if ext not in config["output"]["supported_extensions"]:
        raise ValueError(
            f"Unsupported output file format: {ext}. "
            f"Supported: {', '.join(config['output']['supported_extensions'])}"
        )

    content = generate_json(records) if ext == ".json" else generate_html_table(records)

    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    if os.path.exists(output_path):
        os.remove(output_path)

    try:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Error writing pay data to file: {output_path} reason: {e}")
        raise

    logger.info(f"Wrote {len(records)} pay data records to {output_path}")
    return output_path
