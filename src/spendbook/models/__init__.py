"""Database models."""
from spendbook.models.category import Category
from spendbook.models.category_rule import CategoryRule
from spendbook.models.transaction import Transaction
from spendbook.models.upload_log import UploadLog

__all__ = ["Category", "CategoryRule", "Transaction", "UploadLog"]
