"""Generate Go client bindings from API and exchange reference documents."""

__version__ = "0.1.0"
