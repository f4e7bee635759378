from vendor_api.models.vendor_application import VendorApplication

__all__ = ["VendorApplication"]
