"""Command-line interface for PageTran."""
