"""Display labels for raw Experian codes. Applied only when rendering responses."""

ACCOUNT_TYPES = {
    "10": "Credit Card",
    "51": "Personal Loan",
    "52": "Home Loan",
    "53": "Auto Loan",
    "54": "Business Loan",
}

PORTFOLIO_TYPES = {
    "R": "Revolving",
    "I": "Installment",
    "O": "Open",
}

ACCOUNT_STATUSES = {
    "11": "Active",
    "13": "Closed",
    "53": "Written Off",
    "71": "Settled",
}


def account_type_label(code: str) -> str:
    return ACCOUNT_TYPES.get(code, f"Account Type {code}")


def portfolio_type_label(code: str) -> str:
    return PORTFOLIO_TYPES.get(code, code)


def account_status_label(code: str) -> str:
    return ACCOUNT_STATUSES.get(code, f"Status {code}")
