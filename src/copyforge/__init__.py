"""copyforge: generate, edit and export e-commerce marketing copy."""

__version__ = "0.1.0"
