from Parser.Parser import DEFAULT_ENCTYPE, build_catalog, find_forms

__all__ = ["DEFAULT_ENCTYPE", "build_catalog", "find_forms"]
