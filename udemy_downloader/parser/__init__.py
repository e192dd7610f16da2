"""Parsers for curriculum, lecture, and course payloads."""

from .curriculum_parser import CurriculumParser, ParseError, SupplementaryAssetError

__all__ = ["CurriculumParser", "ParseError", "SupplementaryAssetError"]
