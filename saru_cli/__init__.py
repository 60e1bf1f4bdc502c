"""saru -- project generator for the saruCanvas web-canvas framework."""

__version__ = "0.1.0rc1"
