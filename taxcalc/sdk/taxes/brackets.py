"""Progressive (marginal bracket) tax calculation."""

from decimal import Decimal
from typing import Any, Iterable, List, Mapping, NamedTuple, Union

from pydantic import ValidationError

from ..errors import InvalidInput
from ..money import ZERO, percent_of, round_cents, to_decimal
from ..schemas import BracketDetail, format_validation_error
from .schemas import TaxBracket, check_bracket_table

BracketLike = Union[TaxBracket, Mapping[str, Any]]


class BracketTax(NamedTuple):
    """Tax owed on an amount and the rate applied to its last dollar."""

    tax: Decimal
    marginal_rate: Decimal


def _as_brackets(brackets: Iterable[BracketLike]) -> List[TaxBracket]:
    table = []
    for i, bracket in enumerate(brackets):
        if isinstance(bracket, TaxBracket):
            table.append(bracket)
            continue
        try:
            table.append(TaxBracket.model_validate(bracket))
        except ValidationError as e:
            raise InvalidInput(format_validation_error(f"brackets[{i}]", e)) from e
    table.sort(key=lambda b: b.min)
    try:
        check_bracket_table(table)
    except ValueError as e:
        raise InvalidInput(f"invalid bracket table: {e}") from e
    return table


def _check_income(taxable_income: Any) -> Decimal:
    income = to_decimal(taxable_income, "taxable_income")
    if income < 0:
        raise InvalidInput(f"taxable_income must not be negative, got {income}")
    return income


def _amount_in_bracket(income: Decimal, bracket: TaxBracket) -> Decimal:
    if income <= bracket.min:
        return ZERO
    upper = income if bracket.max is None else min(bracket.max, income)
    return upper - bracket.min


def calculate_progressive_tax(taxable_income: Any, brackets: Iterable[BracketLike]) -> BracketTax:
    """Calculate tax by applying each bracket's rate to the income within it.

    Args:
        taxable_income: Amount to tax (>= 0)
        brackets: Bracket table; sorted by min before use

    Returns:
        BracketTax with tax rounded half-up to the cent and the marginal rate
        (percent) of the highest bracket the income reaches. Zero income gets
        the lowest bracket's rate.

    Raises:
        InvalidInput: negative income, or an empty, invalid or non-contiguous table
    """
    income = _check_income(taxable_income)
    table = _as_brackets(brackets)

    tax = ZERO
    marginal_rate = table[0].rate
    for bracket in table:
        if income <= bracket.min:
            break
        tax += percent_of(_amount_in_bracket(income, bracket), bracket.rate)
        marginal_rate = bracket.rate

    return BracketTax(tax=round_cents(tax), marginal_rate=marginal_rate)


def bracket_breakdown(taxable_income: Any, brackets: Iterable[BracketLike]) -> List[BracketDetail]:
    """Show how much income, and tax, falls in every bracket of the table.

    Brackets above the income are included with zero amounts.
    """
    income = _check_income(taxable_income)
    details = []
    for bracket in _as_brackets(brackets):
        amount = _amount_in_bracket(income, bracket)
        details.append(BracketDetail(
            rate=bracket.rate,
            min=bracket.min,
            max=bracket.max,
            taxable_amount=round_cents(amount),
            tax=round_cents(percent_of(amount, bracket.rate)),
        ))
    return details


def scale_brackets(brackets: Iterable[BracketLike], factor: Decimal) -> List[TaxBracket]:
    """Multiply every bracket threshold by factor, keeping rates."""
    return [
        TaxBracket(
            rate=b.rate,
            min=b.min * factor,
            max=None if b.max is None else b.max * factor,
        )
        for b in _as_brackets(brackets)
    ]
