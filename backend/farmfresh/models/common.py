"""Shared field types."""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Prices are exact decimals in Python and in MongoDB (Decimal128) but plain
# numbers in JSON responses.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
