"""
Pydantic models for scraped and analyzed email records.

Field names are snake_case in Python; the external names used in the
spreadsheet header and the model response (e.g. ``from``,
``whatIsBeingPrinted``) are kept as aliases.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class EmailRecord(BaseModel):
    """One email scraped from the archive listing."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    href: str
    date: str
    subject: Optional[str] = None
    sender: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    content: Optional[str] = None  # Filled in from the detail page

    def to_row_dict(self) -> Dict[str, Any]:
        """Dump using external field names, in column order."""
        return self.model_dump(by_alias=True)


class AnalyzedEmailRecord(EmailRecord):
    """EmailRecord with the two AI-extracted fields (both set or both None)."""
    what_is_being_printed: Optional[str] = Field(default=None, alias="whatIsBeingPrinted")
    who_is_printing: Optional[str] = Field(default=None, alias="whoIsPrinting")


class AIExtractionResult(BaseModel):
    """Validated shape of the model response. Extra keys are ignored."""
    what_is_being_printed: StrictStr = Field(alias="whatIsBeingPrinted")
    who_is_printing: StrictStr = Field(alias="whoIsPrinting")


@dataclass
class AnalysisResult:
    """Outcome of extracting fields from one email."""
    email_id: str
    success: bool
    what_is_being_printed: Optional[str] = None
    who_is_printing: Optional[str] = None
    error: Optional[str] = None
    raw_response: Optional[str] = None

    def to_record(self, record: EmailRecord) -> AnalyzedEmailRecord:
        """
        Merge this result onto a copy of ``record``.

        Failed results render both derived fields as None.
        """
        data = record.model_dump(by_alias=True)
        if self.success:
            data["whatIsBeingPrinted"] = self.what_is_being_printed
            data["whoIsPrinting"] = self.who_is_printing
        else:
            data["whatIsBeingPrinted"] = None
            data["whoIsPrinting"] = None
        return AnalyzedEmailRecord.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "email_id": self.email_id,
            "success": self.success,
            "whatIsBeingPrinted": self.what_is_being_printed,
            "whoIsPrinting": self.who_is_printing,
            "error": self.error
        }
