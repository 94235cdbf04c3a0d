"""Failure taxonomy of the invoice generators

Every expected failure is returned as an Error inside a Result; callers
switch on ``error.code``.
"""

from enum import Enum
from typing import Optional
from libs.result import Error


class InvoiceErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_INVOICE = "DUPLICATE_INVOICE"
    SUBJECT_NOT_ACTIVE_IN_PERIOD = "SUBJECT_NOT_ACTIVE_IN_PERIOD"
    MISSING_BILLING_CONFIG = "MISSING_BILLING_CONFIG"
    MISSING_OUTCOME_DATA = "MISSING_OUTCOME_DATA"
    INSTALLMENT_OUT_OF_RANGE = "INSTALLMENT_OUT_OF_RANGE"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


def not_found(subject_type: str, subject_id: str) -> Error:
    return Error(
        code=InvoiceErrorCode.NOT_FOUND.value,
        message=f"{subject_type} {subject_id} not found",
        reason="Billing subject does not exist for this law firm",
        details={"subject_type": subject_type, "subject_id": subject_id},
    )


def duplicate_invoice(message: str, existing_invoice_number: Optional[str] = None) -> Error:
    details = {}
    if existing_invoice_number:
        details["existing_invoice_number"] = existing_invoice_number
    return Error(
        code=InvoiceErrorCode.DUPLICATE_INVOICE.value,
        message=message,
        reason="Duplicate invoice prevention",
        details=details,
    )


def subject_not_active(message: str) -> Error:
    return Error(
        code=InvoiceErrorCode.SUBJECT_NOT_ACTIVE_IN_PERIOD.value,
        message=message,
        reason="Billing subject is not active for the requested period",
    )


def missing_billing_config(matter_id: str, reason: str) -> Error:
    return Error(
        code=InvoiceErrorCode.MISSING_BILLING_CONFIG.value,
        message=f"Billing configuration incomplete for matter {matter_id}",
        reason=reason,
        details={"matter_id": matter_id},
    )


def missing_outcome_data(matter_id: str, billing_method: str) -> Error:
    return Error(
        code=InvoiceErrorCode.MISSING_OUTCOME_DATA.value,
        message=f"No case outcome recorded for matter {matter_id}",
        reason=f"Billing method '{billing_method}' requires a case outcome",
        details={"matter_id": matter_id, "billing_method": billing_method},
    )


def installment_out_of_range(installment_number: int, installment_count: int) -> Error:
    return Error(
        code=InvoiceErrorCode.INSTALLMENT_OUT_OF_RANGE.value,
        message=f"Installment {installment_number} exceeds the plan's "
                f"{installment_count} installments",
        reason="Installment number out of range",
        details={
            "installment_number": installment_number,
            "installment_count": installment_count,
        },
    )


def persistence_error(exc: Exception) -> Error:
    return Error(
        code=InvoiceErrorCode.PERSISTENCE_ERROR.value,
        message="Failed to generate invoice",
        reason=str(exc),
    )
