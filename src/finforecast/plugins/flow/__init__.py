"""
Flow plugins for income and expense records.
"""

from .expense import ExpenseRecord, FlowExpense
from .income import FlowIncome, IncomeRecord

__all__ = [
    "FlowIncome",
    "FlowExpense",
    "IncomeRecord",
    "ExpenseRecord",
]
