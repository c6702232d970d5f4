"""Category and product management commands."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import NotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text()
    price_cents: Integer(required=True, min_value=0)
    stock: Integer(required=True, min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price_cents: Integer(min_value=0)
    stock: Integer(min_value=0)
    category_id: Identifier()
    image_url: String(max_length=500)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def _ensure_category_exists(category_id):
    try:
        current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise NotFound("Category not found") from None


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category.create(name=command.name, description=command.description)
        current_domain.repository_for(Category).add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        try:
            category = repo.get(command.category_id)
        except ObjectNotFoundError:
            raise NotFound("Category not found") from None

        category.update_details(name=command.name, description=command.description)
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        try:
            category = repo.get(command.category_id)
        except ObjectNotFoundError:
            raise NotFound("Category not found") from None

        # Products outlive their category
        product_repo = current_domain.repository_for(Product)
        products = product_repo._dao.query.filter(category_id=str(category.id)).limit(None).all().items
        for product in products:
            product.detach_category()
            product_repo.add(product)

        category.mark_deleted(products_detached=len(products))
        repo.add(category)
        repo._dao.delete(category)

        logger.info("Category deleted", category_id=str(category.id), products_detached=len(products))


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            _ensure_category_exists(command.category_id)

        product = Product.create(
            name=command.name,
            description=command.description,
            price_cents=command.price_cents,
            stock=command.stock,
            category_id=command.category_id,
            image_url=command.image_url,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        if command.category_id:
            _ensure_category_exists(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price_cents=command.price_cents,
            stock=command.stock,
            category_id=command.category_id,
            image_url=command.image_url,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise NotFound("Product not found") from None

        product.mark_deleted()
        repo.add(product)
        repo._dao.delete(product)

        logger.info("Product deleted", product_id=str(product.id))
