from .market import Marketplace


__all__ = ["Marketplace"]
