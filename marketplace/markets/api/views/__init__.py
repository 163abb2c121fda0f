from .market_views import marketplace_detail, marketplace_list, marketplace_membership


__all__ = ["marketplace_list", "marketplace_detail", "marketplace_membership"]
