"""Philadelphia OPA property lookup: parcel numbers and street addresses resolved to property records."""

__version__ = "0.1.0"
