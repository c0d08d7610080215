# sheetlens/services/__init__.py
from sheetlens.services.container import Services, build_services

__all__ = ["Services", "build_services"]
