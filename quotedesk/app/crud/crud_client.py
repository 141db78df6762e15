"""CRUD operations for clients."""

from quotedesk.app.crud.base import CRUDBase
from quotedesk.app.models.client import Client

client_crud = CRUDBase(Client)
