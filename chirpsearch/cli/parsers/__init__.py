from .base import get_base_parser

__all__ = ["get_base_parser"]
