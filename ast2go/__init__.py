from ast2go.config import Config
from ast2go.errors import (
    FrontendError,
    MalformedRecordError,
    MalformedTreeError,
    TranslationError,
    UnrecognizedKindError,
    UnsupportedConstructError,
)
from ast2go.translator import render_unit, translate

__all__ = [
    "Config",
    "FrontendError",
    "MalformedRecordError",
    "MalformedTreeError",
    "TranslationError",
    "UnrecognizedKindError",
    "UnsupportedConstructError",
    "render_unit",
    "translate",
]
