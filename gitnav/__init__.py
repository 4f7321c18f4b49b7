"""gitnav — fast git repository navigator with fuzzy finding."""

__version__ = "0.4.0"
