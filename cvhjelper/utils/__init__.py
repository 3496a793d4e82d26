"""Utility modules."""

from .parser import extract_json, parse_evaluation_response

__all__ = ["extract_json", "parse_evaluation_response"]
