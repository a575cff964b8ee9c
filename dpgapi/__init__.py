"""DPG API sync: publish nominee and DPG records to the public goods API repo."""

__version__ = "0.1.0"
