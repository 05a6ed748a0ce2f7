"""Database-backed categorization: rule lookup, learning and bulk application."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spendbook.categorization.rules import categorize, extract_keyword, sort_rules_for_bulk
from spendbook.core.exceptions import CategoryNotFoundError, DuplicateRuleError
from spendbook.models.category_rule import CategoryRule
from spendbook.repositories import CategoryRepository, RuleRepository, TransactionRepository
from spendbook.schemas.upload import LearnResult

logger = logging.getLogger(__name__)


class CategorizationService:
    """Apply and maintain keyword rules against the persisted store."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.categories = CategoryRepository(db)
        self.rules = RuleRepository(db)
        self.transactions = TransactionRepository(db)

    async def load_rules(self) -> list[CategoryRule]:
        """Current rule set in insertion order."""
        return await self.rules.list_ordered()

    async def categorize(self, description: str) -> UUID | None:
        """Categorize one description against the current rules."""
        return categorize(description, await self.load_rules())

    async def learn_rule(self, description: str, category_id: UUID) -> LearnResult:
        """Create a rule from the first significant word of ``description``.

        Unknown categories and descriptions without a usable keyword fail
        without touching the store. An existing rule for the same keyword is
        reported with ``already_exists=True`` and its id.
        """
        if await self.categories.get_by_id(category_id) is None:
            return LearnResult(success=False)

        keyword = extract_keyword(description)
        if keyword is None:
            return LearnResult(success=False)

        existing = await self.rules.get_by_keyword(keyword)
        if existing is not None:
            return LearnResult(
                success=False, keyword=keyword, rule_id=existing.id, already_exists=True
            )

        rule = await self.rules.add(CategoryRule(keyword=keyword.lower(), category_id=category_id))
        await self.db.commit()

        logger.info("Learned categorization rule", extra={"rule_id": str(rule.id)})
        return LearnResult(success=True, keyword=keyword, rule_id=rule.id)

    async def add_rule(self, keyword: str, category_id: UUID) -> CategoryRule:
        """Create a rule for an explicit keyword.

        Raises:
            CategoryNotFoundError: If the category does not exist
            DuplicateRuleError: If the keyword already has a rule (any case)
        """
        normalized = keyword.strip().lower()

        if await self.categories.get_by_id(category_id) is None:
            raise CategoryNotFoundError(category_id)

        existing = await self.rules.get_by_keyword(normalized)
        if existing is not None:
            raise DuplicateRuleError(normalized, existing.id)

        rule = await self.rules.add(CategoryRule(keyword=normalized, category_id=category_id))
        await self.db.commit()
        return rule

    async def bulk_apply(self) -> int:
        """Categorize every uncategorized transaction; return how many were assigned.

        Rules are evaluated in ascending keyword order. Transactions that
        already have a category are never modified.
        """
        rules = sort_rules_for_bulk(await self.load_rules())
        if not rules:
            return 0

        categorized = 0
        for txn in await self.transactions.get_uncategorized():
            category_id = categorize(txn.description, rules)
            if category_id is not None:
                txn.category_id = category_id
                categorized += 1

        await self.db.commit()

        logger.info(
            "Applied categorization rules",
            extra={"rules_count": len(rules), "categorized": categorized},
        )
        return categorized
