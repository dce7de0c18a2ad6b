from .assets import AssetsAPI

__all__ = ["AssetsAPI"]
