"""Taiwan actual-price registration (實價登錄) ingestion backend."""

__version__ = "1.0.0"
