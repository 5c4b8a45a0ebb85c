"""
Pydantic models for the Pay Stub Extractor
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class PayDataSection(BaseModel):
    """Base for pay stub sections: immutable, serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CheckFields(PayDataSection):
    """Check metadata from the Earnings Statement block"""
    check_number: str = Field("", description="Voucher Number")
    check_date: str = Field("", description="Check Date")
    pay_period_start: str = Field("", description="Period Beginning")
    pay_period_end: str = Field("", description="Period Ending")
    salary: str = Field("", description="Salary")
    net_pay: str = Field("", description="Net Pay")
    fed_tax_income: str = Field("", description="Fed Taxable Income")
    hours_worked: str = Field("", description="Total Hours Worked")


class GrossEarningsFields(PayDataSection):
    """Gross Earnings total row of the Earnings table"""
    hours: str = Field("", description="Gross Earnings hours")
    period: str = Field("", description="Gross Earnings current period amount")
    ytd: str = Field("", description="Gross Earnings year to date")
    regular_rate: str = Field("", description="REGULAR row hourly rate")


class TaxesFields(PayDataSection):
    """Taxes total row"""
    period: str = Field("", description="Taxes current period amount")
    ytd: str = Field("", description="Taxes year to date")


class DeductionsFields(PayDataSection):
    """Deductions total row"""
    period: str = Field("", description="Deductions current period amount")
    ytd: str = Field("", description="Deductions year to date")


class DepositsFields(PayDataSection):
    """Direct Deposits total"""
    total: str = Field("", description="Total Direct Deposits")


class PayData(PayDataSection):
    """Complete pay data extracted from one pay stub"""
    check: CheckFields = Field(default_factory=CheckFields)
    gross_earnings: GrossEarningsFields = Field(default_factory=GrossEarningsFields)
    taxes: TaxesFields = Field(default_factory=TaxesFields)
    deductions: DeductionsFields = Field(default_factory=DeductionsFields)
    deposits: DepositsFields = Field(default_factory=DepositsFields)


class TextExtractionRequest(BaseModel):
    """Request body for extracting pay data from already converted text"""
    text: str = Field(..., min_length=1, description="Pay stub text, columns joined by ' | '")


class ExtractionResponse(BaseModel):
    """API response for extraction endpoints"""
    success: bool
    message: str
    filename: Optional[str] = None
    strategy: Optional[str] = None
    data: Optional[PayData] = None
    error_category: Optional[str] = None


class BatchExtractionResponse(BaseModel):
    """API response for the batch endpoint"""
    total_files: int
    successful: int
    failed: int
    results: List[ExtractionResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """API health check response"""
    status: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
