"""Shared schema types."""

from decimal import Decimal
from typing import Annotated

from pydantic import Field, PlainSerializer

# Money is validated as Decimal and emitted as a JSON number
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]

NonNegativeMoney = Annotated[Money, Field(ge=0, max_digits=10, decimal_places=2)]
