from Browser.Browser import Browser

__all__ = ["Browser"]
