"""Data access layer."""
from spendbook.repositories.category import CategoryRepository
from spendbook.repositories.rule import RuleRepository
from spendbook.repositories.transaction import TransactionRepository
from spendbook.repositories.upload_log import UploadLogRepository

__all__ = [
    "CategoryRepository",
    "RuleRepository",
    "TransactionRepository",
    "UploadLogRepository",
]
