"""Field-name constants for every logical table in the record store.

These strings are the contract with the external base. Nothing outside
this module should spell a field name literally.
"""

from __future__ import annotations


class OrderFields:
    """Unfulfilled Orders Log."""

    MESSAGE_IDS = "Partner Deal Message ID"  # comma-joined snowflakes
    BUTTONS_DISABLED = "Partner Deal Buttons Disabled"
    PRODUCT_NAME = "Product Name"
    SKU = "SKU"
    SIZE = "Size"
    BRAND = "Brand"
    TARGET_PRICE = "Target Outsource Buying Price"
    ORDER_ID = "Order ID"


class SellerFields:
    """Sellers Database. The primary column holds the canonical seller code."""

    CODE = "Seller ID"
    WEBHOOK_URL = "Discord Webhook URL"


class InventoryFields:
    """Inventory Units, one record per successful claim."""

    PRODUCT_NAME = "Product Name"
    SKU = "SKU"
    SIZE = "Size"
    BRAND = "Brand"
    VAT_TYPE = "VAT Type"
    PURCHASE_PRICE = "Purchase Price"
    SHIPPING_DEDUCTION = "Shipping Deduction"
    TICKET_NUMBER = "Ticket Number"
    PURCHASE_DATE = "Purchase Date"
    SOURCE = "Source"
    VERIFICATION_STATUS = "Verification Status"
    PAYMENT_NOTE = "Payment Note"
    PAYMENT_STATUS = "Payment Status"
    AVAILABILITY_STATUS = "Availability Status"
    MARGIN = "Margin %"
    TYPE = "Type"
    SELLER = "Seller ID"
    ORDER = "Unfulfilled Orders Log"


class PartnerOfferFields:
    """Partner Offers, one record per accepted counter-offer."""

    AMOUNT = "Partner Offer"
    OFFER_DATE = "Offer Date"
    SELLER = "Seller ID"
    ORDER = "Linked Orders"


# Fixed values written on every claimed inventory unit.
CLAIM_DEFAULTS = {
    InventoryFields.VAT_TYPE: "Margin",
    InventoryFields.SHIPPING_DEDUCTION: 0,
    InventoryFields.SOURCE: "Outsourced",
    InventoryFields.VERIFICATION_STATUS: "Verified",
    InventoryFields.PAYMENT_STATUS: "To Pay",
    InventoryFields.AVAILABILITY_STATUS: "Reserved",
    InventoryFields.MARGIN: "10%",
    InventoryFields.TYPE: "Custom",
}
