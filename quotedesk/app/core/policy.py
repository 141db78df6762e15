"""Organisation policy text and thresholds that accompany every quotation."""

from decimal import Decimal

COMPANY = {
    "name": "Zen Engineering Solutions",
    "tagline": "Industrial Automation & Safety Solutions",
    "address": "Flat No. 001, Shree Ram Siddhi Apartment, 100 Feet Rd, Sangli - 416416, Maharashtra, India",
    "phone": "9673727173",
    "email": "sales@zenengineerings.com",
    "gstin": "27AACFZ8216H1ZX",
}

TERMS = [
    ("Payment Terms", "1) 50% advance along with PO. 2) 30% before material dispatch. 3) 15% against running bill. 4) 5% after completion of job within 7 working days."),
    ("Delivery Time", "As discussed in the proposal or within mutually agreed timelines from receipt of confirmed purchase order and advance payment."),
    ("Transportation", "Inclusive unless otherwise specified in the quotation."),
    ("Packing", "Standard packing included."),
    ("Unloading / Handling", "In client scope unless specifically mentioned."),
    ("Price Validity", "30 days from the date of quotation unless revised in writing."),
    ("Supply of Material", "As per standard manufacturer packing and specifications."),
    ("Jurisdiction", "All disputes subject to Sangli jurisdiction."),
    ("Statutory Variations", "Any change in duties / taxes / levies or new impositions by Central / State authorities will be to client's account."),
    ("Scaffolding / Labour Accommodation", "In client scope, wherever required."),
    ("Return Policy", "Goods once sold will not be taken back."),
]

ACCEPTANCE_NOTE = (
    "Kindly sign and return a copy of this document along with your purchase order "
    "as acceptance of the above terms."
)

# Upper bounds (exclusive) of each low-margin band, in percent.
LOW_MARGIN_THRESHOLDS = {
    "critical": Decimal("10"),
    "warning": Decimal("20"),
    "low": Decimal("30"),
}
