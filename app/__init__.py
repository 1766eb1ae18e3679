"""Products API - product catalog service and supplier data loader."""

__version__ = "1.0.0"
