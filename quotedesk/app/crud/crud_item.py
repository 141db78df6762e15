"""CRUD operations for catalog items."""

from quotedesk.app.crud.base import CRUDBase
from quotedesk.app.models.item import Item

item_crud = CRUDBase(Item, order_by=Item.name.asc())
