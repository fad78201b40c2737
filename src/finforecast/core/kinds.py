"""
FinForecast Kind Constants (entity types that take part in a simulation).
"""


class K:
    # === Balance holders ===
    ASSET = "asset"  # Savings, brokerage, pension pots (interest-bearing)
    LIABILITY = "liability"  # Loans repaid on a fixed schedule

    # === External flows ===
    INCOME = "income"  # Salary, side jobs, dividends paid out
    EXPENSE = "expense"  # Rent, utilities, subscriptions

    @classmethod
    def all_kinds(cls) -> list[str]:
        """Enumerate all known kinds (for validation and docs)."""
        return [
            cls.ASSET,
            cls.INCOME,
            cls.EXPENSE,
            cls.LIABILITY,
        ]
