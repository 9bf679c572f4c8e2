"""
Exception classes raised while parsing and reducing recipes
"""

from typing import Optional


class CooklangError(ValueError):
    """Base exception for recipe parsing"""
    pass


class RecipeSyntaxError(CooklangError):
    """Raised when a line of recipe markup cannot be parsed"""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"line {line}, column {column}: {message}")


class RecipeReductionError(CooklangError):
    """Raised when a parsed recipe cannot be reduced to its IR"""
    def __init__(self, message: str, subject: Optional[str] = None):
        self.message = message
        self.subject = subject
        if subject is None:
            super().__init__(message)
        else:
            super().__init__(f"'{subject}': {message}")


class AmountParseError(CooklangError):
    """Raised when amount text has a malformed numeric quantity"""
    def __init__(self, text: str, reason: str = "not a number"):
        self.text = text
        self.reason = reason
        super().__init__(f"Could not parse amount '{text}': {reason}")


class AmountMergeError(CooklangError):
    """Raised when two amounts of incompatible shape are added"""
    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot add {right} amount to {left} amount")


class ScalingError(CooklangError):
    """Raised when an amount cannot be resolved for a servings count"""
    pass
