"""buildplan: module-dependency resolution for multi-module native builds."""

__version__ = "0.1.0"
