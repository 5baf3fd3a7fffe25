"""
Category names shared by the ledger, the CSV codec and the CLI.
"""

# Seed list for a fresh ledger; also what a reset restores.
DEFAULT_CATEGORIES = (
    "Groceries",
    "Dining Out",
    "Rent/Mortgage",
    "Utilities",
    "Transportation",
    "Health & Fitness",
    "Entertainment",
    "Shopping",
    "Travel",
    "Other",
)

# Assigned to imported rows with a blank category column.
FALLBACK_CATEGORY = "Other"

# Label used by the category breakdown for transactions without a category.
UNCATEGORIZED = "Uncategorized"

# Category filter value that lets every transaction through.
ALL_CATEGORIES = "All"

# Transaction kinds, derived from the sign of the amount.
INCOME = "income"
EXPENSE = "expense"
TRANSACTION_KINDS = (EXPENSE, INCOME)


def kind_for_amount(amount: float) -> str:
    """Return the transaction kind implied by the sign of ``amount``."""
    return EXPENSE if amount < 0 else INCOME
