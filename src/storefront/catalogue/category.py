"""Category aggregate for grouping products in the catalogue."""

from datetime import UTC, datetime

from protean.fields import DateTime, String, Text

from storefront.catalogue.events import CategoryCreated, CategoryDeleted, CategoryDetailsUpdated
from storefront.domain import storefront


@storefront.aggregate
class Category:
    name: String(required=True, max_length=100)
    description: Text()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None):
        now = datetime.now(UTC)
        category = cls(
            name=name,
            description=description,
            created_at=now,
            updated_at=now,
        )
        category.raise_(CategoryCreated(category_id=category.id, name=name))
        return category

    def update_details(self, name=None, description=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description

        self.updated_at = datetime.now(UTC)

        self.raise_(CategoryDetailsUpdated(category_id=self.id, name=self.name))

    def mark_deleted(self, products_detached=0):
        self.raise_(CategoryDeleted(category_id=self.id, products_detached=products_detached))
