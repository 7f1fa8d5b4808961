"""Exceptions used throughout lingplot"""
from typing import Collection

from ._text import enumeration, plural


class KeysMissing(KeyError):
    "Cells without an entry in a user-supplied mapping"
    def __init__(self, keys: Collection, from_name: str, from_dict: dict):
        KeyError.__init__(self, keys, from_name, from_dict)

    def __str__(self):
        keys, from_name, from_dict = self.args
        n = len(keys)
        return f"{plural('Key', n)} {enumeration(map(repr, keys))} missing from {from_name}={from_dict!r}"


class EvalError(Exception):
    "An expression could not be evaluated in a Dataset"
    def __init__(self, expression, exception, context):
        Exception.__init__(self, f"{expression!r} in {context}: {exception}")


class ProjectLayoutError(Exception):
    "A project directory does not follow the directory conventions"
    def __init__(self, report):
        Exception.__init__(self, str(report))
        self.report = report


class ModelFitError(Exception):
    "None of the attempts to fit a mixed-effects model succeeded"
    def __init__(self, formula, errors):
        desc = '; '.join(f"{method}: {error}" for method, error in errors)
        Exception.__init__(self, f"Could not fit {formula!r} ({desc})")
        self.errors = errors
