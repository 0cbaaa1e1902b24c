"""A virtual machine for the LC-3 computer: image loading, execution and a console command."""

__version__ = "0.1.0"

__all__ = ["__version__"]