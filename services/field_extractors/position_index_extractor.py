"""
Position-index pay data extraction
Walks the positioned text elements of a page: find a label element, then read
the element a fixed number of items after it
"""
import logging
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models import PayData
from services.errors import ElementNotFound
from services.extractors.base_extractor import DocumentContent, DocumentPage, PageIndex, PositionedTextElement
from services.field_extractors.base_field_extractor import BasePayDataExtractor, ExtractionStrategy

logger = logging.getLogger(__name__)


class AnchorCondition(BaseModel):
    """Which element to anchor on"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    text: str
    page_number: int = Field(1, alias="pageNumber")
    item_number_after: Optional[int] = Field(None, alias="itemNumberAfter")
    precondition: Optional[bool] = None
    and_not: Optional[str] = None


class OffsetTarget(BaseModel):
    """Where the value sits relative to the anchor"""
    model_config = ConfigDict(frozen=True)

    position_offset: int = Field(..., ge=1)


class PositionRule(BaseModel):
    """A {when, extract} lookup rule"""
    model_config = ConfigDict(frozen=True)

    when: AnchorCondition
    extract: OffsetTarget


def get_page(pages: PageIndex, page_number: int) -> DocumentPage:
    page = pages.get(page_number)
    if page is None:
        raise ElementNotFound(page_number, reason="page not found")
    return page


def find_anchor(page: DocumentPage, text: str, after_item: Optional[int] = None) -> Optional[PositionedTextElement]:
    """
    First element in item order whose text equals text

    Args:
        page: page to scan
        text: exact element text
        after_item: only consider items numbered strictly above this

    Returns:
        The element, or None
    """
    for element in page.ordered():
        if after_item is not None and element.item_number <= after_item:
            continue
        if element.text == text:
            return element
    return None


def read_at_offset(pages: PageIndex, page_number: int, anchor_item: int, offset: int) -> PositionedTextElement:
    """
    Element offset items after the anchor on the same page

    Raises:
        ElementNotFound: the page or the target item does not exist
    """
    page = get_page(pages, page_number)
    target = anchor_item + offset
    element = page.elements.get(target)
    if element is None or not element.text:
        raise ElementNotFound(page_number, item_number=target, reason=f"no element {offset} after item {anchor_item}")
    return element


def evaluate_rule(pages: PageIndex, rule: PositionRule) -> Optional[str]:
    """
    Resolve a lookup rule to the target element's text

    Returns None when the precondition is false, or when the anchor is absent
    and the rule's exclusion label is present instead.

    Raises:
        ElementNotFound: anchor and exclusion label are both absent, or the
            target element does not exist
    """
    when = rule.when
    if when.precondition is False:
        return None

    page = get_page(pages, when.page_number)
    anchor = find_anchor(page, when.text, when.item_number_after)

    if anchor is None:
        if when.and_not and find_anchor(page, when.and_not, when.item_number_after) is not None:
            logger.debug(f"'{when.text}' absent, found '{when.and_not}' instead")
            return None
        raise ElementNotFound(when.page_number, text=when.text, reason="anchor element not found")

    return read_at_offset(pages, anchor.page_number, anchor.item_number, rule.extract.position_offset).text


def parse_amount(value: Optional[str]) -> Optional[float]:
    """'1,234.50' -> 1234.5; None when the text is not a number"""
    if value is None:
        return None
    try:
        return float(value.replace(",", "").replace("$", "").strip())
    except ValueError:
        return None


def is_nonzero(value: Optional[str]) -> bool:
    """Unparseable amounts count as non-zero"""
    amount = parse_amount(value)
    return amount is None or amount != 0


class SectionLocator:
    """
    Tracks the most recently matched section anchor of one document

    Its item number only ever increases, so a label repeated earlier on the
    page is never matched again.
    """

    def __init__(self, pages: PageIndex, page_number: int):
        self.pages = pages
        self.page_number = page_number
        self.item_number: Optional[int] = None

    def advance(self, text: str) -> Optional[PositionedTextElement]:
        """Move the lower bound to the next element labelled text, if there is one"""
        element = find_anchor(get_page(self.pages, self.page_number), text, self.item_number)
        if element is not None:
            self.item_number = element.item_number
        else:
            logger.debug(f"Section anchor '{text}' not found after item {self.item_number}")
        return element

    def rule(self, text: str, offset: int, precondition: Optional[bool] = None,
             and_not: Optional[str] = None) -> PositionRule:
        return PositionRule(
            when=AnchorCondition(
                text=text,
                page_number=self.page_number,
                item_number_after=self.item_number,
                precondition=precondition,
                and_not=and_not,
            ),
            extract=OffsetTarget(position_offset=offset),
        )

    def read(self, text: str, offset: int, **kwargs) -> Optional[str]:
        return evaluate_rule(self.pages, self.rule(text, offset, **kwargs))


class PositionIndexPayDataExtractor(BasePayDataExtractor):
    """
    Extracts pay data from positioned text elements
    Labels and offsets follow the standard Earnings Statement layout
    """

    strategy = ExtractionStrategy.POSITION_INDEX

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(config)
        settings = self.config["position_index"]
        self.page_number = settings["page_number"]
        self.anchor_text = settings["anchor_text"]
        self.zero_defaults = settings["zero_defaults"]

    def extract(self, document: Union[DocumentContent, PageIndex]) -> PayData:
        """
        Extract pay data from a page index

        Args:
            document: DocumentContent or its page index

        Returns:
            PayData record
        """
        pages = document.pages if isinstance(document, DocumentContent) else document
        get_page(pages, self.page_number)

        locator = SectionLocator(pages, self.page_number)
        if locator.advance(self.anchor_text) is None:
            logger.warning(f"Page anchor '{self.anchor_text}' not found, searching the whole page")

        check = self._check(locator)
        worked = is_nonzero(check["hoursWorked"])
        paid = is_nonzero(check["netPay"])
        logger.debug(f"worked={worked} paid={paid}")

        record = {
            "check": check,
            "grossEarnings": self._gross_earnings(locator, worked),
            "taxes": self._taxes(locator, worked),
            "deductions": self._deductions(locator, worked),
            "deposits": self._deposits(locator, paid),
        }
        return PayData.model_validate(record)

    def _check(self, locator: SectionLocator) -> Dict[str, str]:
        labels = {
            "checkNumber": "Voucher Number",
            "checkDate": "Check Date",
            "payPeriodStart": "Period Beginning",
            "payPeriodEnd": "Period Ending",
            "salary": "Salary",
            "netPay": "Net Pay",
            "fedTaxIncome": "Fed Taxable Income",
            "hoursWorked": "Total Hours Worked",
        }
        check = {name: locator.read(label, 1) for name, label in labels.items()}
        if check["salary"].startswith("$"):
            check["salary"] = check["salary"][1:]
        return check

    def _gross_earnings(self, locator: SectionLocator, worked: bool) -> Dict[str, str]:
        if not worked:
            return dict(self.zero_defaults["grossEarnings"])
        return {
            "hours": locator.read("Gross Earnings", 1),
            "period": locator.read("Gross Earnings", 2),
            "ytd": locator.read("Gross Earnings", 3),
            "regularRate": locator.read("REGULAR", 1),
        }

    def _taxes(self, locator: SectionLocator, worked: bool) -> Dict[str, str]:
        locator.advance("Taxes")
        if not worked:
            return dict(self.zero_defaults["taxes"])
        return {
            "period": locator.read("Taxes", 1),
            "ytd": locator.read("Taxes", 2),
        }

    def _deductions(self, locator: SectionLocator, worked: bool) -> Dict[str, str]:
        locator.advance("Deductions")
        defaults = self.zero_defaults["deductions"]
        values = {
            "period": locator.read("Deductions", 1, precondition=worked, and_not="No Deductions"),
            "ytd": locator.read("Deductions", 2, precondition=worked, and_not="No Deductions"),
        }
        return {name: value or defaults[name] for name, value in values.items()}

    def _deposits(self, locator: SectionLocator, paid: bool) -> Dict[str, str]:
        if not paid:
            return dict(self.zero_defaults["deposits"])
        return {"total": locator.read("Total Direct Deposits", 1)}
