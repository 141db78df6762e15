from quotedesk.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from quotedesk.app.models.user import User  # noqa: F401
from quotedesk.app.models.client import Client  # noqa: F401
from quotedesk.app.models.item import Item  # noqa: F401
from quotedesk.app.models.quotation import Quotation  # noqa: F401
from quotedesk.app.models.quotation_version import QuotationVersion  # noqa: F401
from quotedesk.app.models.quotation_sequence import QuotationSequence  # noqa: F401
from quotedesk.app.models.template import Template  # noqa: F401
from quotedesk.app.models.goal import Goal  # noqa: F401
