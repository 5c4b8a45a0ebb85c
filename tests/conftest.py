"""
Shared fixtures: pay stub text builders, rules and positioned element pages
"""
import copy
import os

import pytest

from config.extraction_config import CONFIG_DIR
from services.extractors.base_extractor import build_page_index
from services.field_extractors.regex_extractor import RegexPayDataExtractor
from services.rules.rule_loader import load_rules

RULES_PATH = os.path.join(CONFIG_DIR, "paystub_rules.json")

DOCUMENT_HEADER = "Non Negotiable - This is not a check - Non Negotiable"
DOCUMENT_FOOTER = "This is the end of the document."

CHECK_TEXT = """Earnings Statement
Voucher Number | 7777
Net Pay | 7,777.77
Total Hours Worked | 77.77
Employee ID | 777777 | Fed Taxable Income | 7,777.77 | Check Date | July 7, 7777
Location | Home.ID | Fed Filing Status | S+ $777 | Period Beginning | July 1, 7777
Salary | $7,777.77 | State Filing Status | S-0 | Period Ending | July 14, 7777
"""

TAXES_TEXT = """Taxes | Amount | YTD
CA | 55.55 | 555.55
CASDI-E | 55.55 | 555.55
FITW | 5,555.55 | 5,555.55
MED | 55.55 | 555.55
SS | 55.55 | 555.55
Taxes | 777.77 | 7,777.77
"""

TAXES_NO_CURRENT_PERIOD_TEXT = """Taxes | Amount | YTD
CA | 0.00 | 5,555.55
CASDI-E | 0.00 | 5,555.55
FITW | 0.00 | 5,555.55
MED | 0.00 | 5,555.55
SS | 0.00 | 5,555.55
0.00 | 77,777.77
"""

GROSS_EARNINGS_TEXT = """Earnings | Rate | Hours | Amount | YTD
ER Cost of | 0.00 | 55.55 | 555.55
ER Cost of | 0.00 | 55.55 | 555.55
GROUP TE | 0.00 | 55.55 | 555.55
Holiday Me | 555.55
REGULAR | 77.7777 | 77.77 | 777.77 | 7,777.77
SICK | 77.7777 | 5.55 | 555.55 | 5,555.55
Gross Earnings | 77.77 | 7,777.77 | 77,777.77
"""

DEDUCTIONS_TEXT = """Deductions | Amount | YTD
DENTAL INS | 5.55 | 55.55
GROUP TERM LIFE CALCULA | 55.55 | 55.55
MEDICAL INS | 55.55 | 555.55
Vol Employee Life | 55.55 | 55.55
Deductions | 77.77 | 777.77
"""

NO_DEDUCTIONS_TEXT = """Deductions | Amount | YTD
No Deductions
"""

DEPOSITS_TEXT = """Direct Deposits | Type | Account | Amount
BANK NAME | C | ***7777 | 7,777.77
Total Direct Deposits | 7,777.77
"""

TIME_OFF_TEXT = """Time Off
Available
to Use
Plan Year
Used
"""

SECTION_ORDER = ["header", "check", "taxes", "gross_earnings", "deductions", "deposits", "time_off", "footer"]

DEFAULT_SECTIONS = {
    "header": DOCUMENT_HEADER,
    "check": CHECK_TEXT,
    "taxes": TAXES_TEXT,
    "gross_earnings": GROSS_EARNINGS_TEXT,
    "deductions": DEDUCTIONS_TEXT,
    "deposits": DEPOSITS_TEXT,
    "time_off": TIME_OFF_TEXT,
    "footer": DOCUMENT_FOOTER,
}

EXPECTED_PAY_DATA = {
    "check": {
        "checkNumber": "7777",
        "checkDate": "July 7, 7777",
        "payPeriodStart": "July 1, 7777",
        "payPeriodEnd": "July 14, 7777",
        "salary": "7,777.77",
        "netPay": "7,777.77",
        "fedTaxIncome": "7,777.77",
        "hoursWorked": "77.77",
    },
    "grossEarnings": {"hours": "77.77", "period": "7,777.77", "ytd": "77,777.77", "regularRate": "77.7777"},
    "taxes": {"period": "777.77", "ytd": "7,777.77"},
    "deductions": {"period": "77.77", "ytd": "777.77"},
    "deposits": {"total": "7,777.77"},
}


def build_pay_stub(**overrides) -> str:
    """Pay stub text in document order; pass section=None to drop a section"""
    sections = {**DEFAULT_SECTIONS, **overrides}
    return "\n".join(sections[name] for name in SECTION_ORDER if sections[name] is not None)


def build_pages(text: str, page_number: int = 1):
    """Page index with one element per ' | '-separated run, in reading order"""
    items = []
    for row, line in enumerate(text.split("\n")):
        x = 0.0
        for run in line.split(" | "):
            if not run:
                continue
            items.append((page_number, run, x, row * 12.0, len(run) * 5.0, 10.0))
            x += len(run) * 5.0 + 20.0
    return build_page_index(items)


@pytest.fixture
def pay_stub_text():
    return build_pay_stub()


@pytest.fixture(scope="session")
def rule_document():
    return load_rules(RULES_PATH)


@pytest.fixture(scope="session")
def pay_data_rules(rule_document):
    return rule_document.resolve()


@pytest.fixture(scope="session")
def regex_extractor(pay_data_rules):
    return RegexPayDataExtractor(pay_data_rules)


SECTION_VARIANTS = {
    "taxes_no_current_period": TAXES_NO_CURRENT_PERIOD_TEXT,
    "no_deductions": NO_DEDUCTIONS_TEXT,
}


@pytest.fixture
def rules_path():
    return RULES_PATH


@pytest.fixture
def make_pay_stub():
    return build_pay_stub


@pytest.fixture
def make_pages():
    return build_pages


@pytest.fixture
def sections():
    return {**DEFAULT_SECTIONS, **SECTION_VARIANTS}


@pytest.fixture
def expected_pay_data():
    return copy.deepcopy(EXPECTED_PAY_DATA)
