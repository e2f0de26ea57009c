"""
Fixed-Point Amount Module

Monetary amounts are stored as a non-negative integer count of
ten-thousandths of a unit. Parsing rejects anything with more than four
fractional digits instead of rounding. NEVER uses float for monetary values.
"""

from dataclasses import dataclass
import re

PRECISION = 4
SCALE = 10 ** PRECISION

_DIGITS = re.compile(r"[0-9]+")


class AmountError(ValueError):
    """Amount text could not be turned into an Amount"""


class InvalidFormat(AmountError):
    """Integer or fractional part is not a plain run of digits"""


class InvalidPrecision(AmountError):
    """More than four fractional digits"""


@dataclass(frozen=True, order=True)
class Amount:
    """
    Immutable fixed-point amount.
    Equality and ordering follow the underlying unit count.
    """
    units: int = 0
    
    def __post_init__(self):
        if not isinstance(self.units, int) or isinstance(self.units, bool):
            raise TypeError(f"Amount units must be an int, got {type(self.units).__name__}")
        if self.units < 0:
            raise ValueError("Amount cannot be negative")
    
    @classmethod
    def zero(cls) -> 'Amount':
        """Additive identity"""
        return cls(0)
    
    @classmethod
    def parse(cls, text: str) -> 'Amount':
        """
        Parse a non-negative decimal string of the form ``integer[.fraction]``
        
        A fraction of one to four digits is right-padded with zeros; an empty
        fraction ("5.") means ``.0000``.
        
        Args:
            text: Decimal text, surrounding whitespace is ignored
            
        Returns:
            Parsed Amount
            
        Raises:
            InvalidPrecision: If the fraction has more than four digits
            InvalidFormat: If either part is not numeric
        """
        if not isinstance(text, str):
            raise InvalidFormat(f"Amount must be text, got {type(text).__name__}")
        
        value = text.strip()
        whole, dot, fraction = value.partition(".")
        
        if dot and len(fraction) > PRECISION:
            raise InvalidPrecision(
                f"A valid amount has at most {PRECISION} fractional digits: '{text}'"
            )
        
        if not _DIGITS.fullmatch(whole):
            raise InvalidFormat(f"Bad input for amount: '{text}'")
        if fraction and not _DIGITS.fullmatch(fraction):
            raise InvalidFormat(f"Bad input for amount: '{text}'")
        
        padded = fraction.ljust(PRECISION, "0")
        return cls(int(whole) * SCALE + int(padded))
    
    def __add__(self, other: 'Amount') -> 'Amount':
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units + other.units)
    
    def __sub__(self, other: 'Amount') -> 'Amount':
        """
        Subtract, leaving this amount unchanged when ``other`` is larger
        
        Insufficient funds is a no-op rather than an error.
        """
        if not isinstance(other, Amount):
            return NotImplemented
        if self >= other:
            return Amount(self.units - other.units)
        return self
    
    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.units == 0
    
    def to_string(self) -> str:
        """Format with exactly four fractional digits"""
        whole, fraction = divmod(self.units, SCALE)
        return f"{whole}.{fraction:0{PRECISION}d}"
    
    def __str__(self) -> str:
        return self.to_string()


def add(a: Amount, b: Amount) -> Amount:
    """Plain addition of two amounts"""
    return a + b


def subtract(a: Amount, b: Amount) -> Amount:
    """``a - b`` if ``a >= b``, otherwise ``a`` unchanged"""
    return a - b
