"""Modifier evaluation.

A modifier is a pure rule: an applicability test chosen by ``type`` (with a
comparison chosen by ``condition``) and a price step chosen by
``calculation.operation``. Modifiers are folded left over the running price,
so each one sees the output of every modifier before it.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Tuple

from leadquote.schemas.pricing import AppliedModifier, PricingModifier

from .form_data import FormData, get_number, get_value, is_numeric, to_decimal

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class ModifierOutcome:
    applied: bool
    new_price: Decimal
    amount: Decimal


# --- conditions ------------------------------------------------------------


def _equals(field_value: Any, target: Any) -> bool:
    # Checkbox answers only match boolean targets.
    if isinstance(field_value, bool) or isinstance(target, bool):
        return isinstance(field_value, bool) and isinstance(target, bool) and field_value == target
    if is_numeric(field_value) and is_numeric(target):
        return to_decimal(field_value) == to_decimal(target)
    if isinstance(field_value, str) and isinstance(target, str):
        return field_value.strip() == target.strip()
    return field_value == target


def _ordered(compare: Callable[[Decimal, Decimal], bool]) -> Callable[[Any, Any], bool]:
    def check(field_value: Any, target: Any) -> bool:
        # A field the customer has not reached yet never satisfies a bound.
        if field_value is None or target is None:
            return False
        return compare(to_decimal(field_value), to_decimal(target))

    return check


CONDITIONS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": _equals,
    "greaterThan": _ordered(operator.gt),
    "lessThan": _ordered(operator.lt),
    "greaterThanOrEqual": _ordered(operator.ge),
    "lessThanOrEqual": _ordered(operator.le),
}

_CONDITION_SYMBOLS = {
    "equals": "=",
    "greaterThan": ">",
    "lessThan": "<",
    "greaterThanOrEqual": ">=",
    "lessThanOrEqual": "<=",
}


def check_condition(field_value: Any, condition: str, target: Any) -> bool:
    check = CONDITIONS.get(condition)
    if check is None:
        return False
    return check(field_value, target)


# --- applicability by modifier type -----------------------------------------


def _per_unit_applies(form_data: FormData, modifier: PricingModifier) -> bool:
    return get_number(form_data, modifier.field) > _ZERO


def _condition_applies(form_data: FormData, modifier: PricingModifier) -> bool:
    if not modifier.condition or modifier.value is None:
        return False
    return check_condition(get_value(form_data, modifier.field), modifier.condition, modifier.value)


APPLICABILITY: Dict[str, Callable[[FormData, PricingModifier], bool]] = {
    "perUnit": _per_unit_applies,
    "conditional": _condition_applies,
    "threshold": _condition_applies,
}


def should_apply(form_data: FormData, modifier: PricingModifier) -> bool:
    test = APPLICABILITY.get(modifier.type)
    if test is None:
        return False
    return test(form_data, modifier)


# --- price steps by operation -----------------------------------------------


def modifier_quantity(form_data: FormData, modifier: PricingModifier, base_quantity: Decimal) -> Decimal:
    """Quantity a per-unit add/subtract step is multiplied by."""
    if modifier.type == "perUnit":
        return get_number(form_data, modifier.field)
    if modifier.type == "threshold" and modifier.calculation.per_unit:
        excess = get_number(form_data, modifier.field) - to_decimal(modifier.value)
        return max(_ZERO, excess)
    return base_quantity


def _step_amount(form_data: FormData, modifier: PricingModifier, base_quantity: Decimal) -> Decimal:
    calc = modifier.calculation
    if calc.per_unit:
        return modifier_quantity(form_data, modifier, base_quantity) * calc.amount
    return calc.amount


def _add(form_data: FormData, modifier: PricingModifier, current: Decimal, base_quantity: Decimal) -> Tuple[Decimal, Decimal]:
    amount = _step_amount(form_data, modifier, base_quantity)
    return current + amount, amount


def _subtract(form_data: FormData, modifier: PricingModifier, current: Decimal, base_quantity: Decimal) -> Tuple[Decimal, Decimal]:
    amount = _step_amount(form_data, modifier, base_quantity)
    return max(_ZERO, current - amount), amount


def _multiply(form_data: FormData, modifier: PricingModifier, current: Decimal, base_quantity: Decimal) -> Tuple[Decimal, Decimal]:
    factor = modifier.calculation.amount
    return current * factor, factor


OPERATIONS: Dict[str, Callable[[FormData, PricingModifier, Decimal, Decimal], Tuple[Decimal, Decimal]]] = {
    "add": _add,
    "subtract": _subtract,
    "multiply": _multiply,
}


def apply_modifier(
    form_data: FormData,
    modifier: PricingModifier,
    current_price: Decimal,
    base_quantity: Decimal,
) -> ModifierOutcome:
    """Evaluate one modifier against the running price.

    Returns ``applied=False`` with the price unchanged when the rule does not
    fire, including rules with an unknown type, condition or operation.
    For ``multiply`` the reported amount is the factor itself.
    """
    step = OPERATIONS.get(modifier.calculation.operation)
    if step is None or not should_apply(form_data, modifier):
        return ModifierOutcome(applied=False, new_price=current_price, amount=_ZERO)
    new_price, amount = step(form_data, modifier, current_price, base_quantity)
    return ModifierOutcome(applied=True, new_price=new_price, amount=amount)


def describe_modifier(modifier: PricingModifier, form_data: FormData) -> str:
    label = modifier.id.replace("_", " ")
    field_value = get_value(form_data, modifier.field)
    if modifier.type == "perUnit":
        return f"{label} ({field_value} units)"
    if modifier.type == "threshold":
        symbol = _CONDITION_SYMBOLS.get(modifier.condition or "", "vs")
        return f"{label} ({field_value} {symbol} {modifier.value})"
    return label


def apply_modifiers(
    form_data: FormData,
    modifiers: Iterable[PricingModifier],
    base_price: Decimal,
    base_quantity: Decimal,
) -> Tuple[Decimal, List[AppliedModifier]]:
    """Fold ``modifiers`` over ``base_price`` in configured order.

    Returns the running price after the last modifier and the audit trail of
    the modifiers that fired, in firing order.
    """
    current = base_price
    applied: List[AppliedModifier] = []
    for modifier in modifiers:
        outcome = apply_modifier(form_data, modifier, current, base_quantity)
        if not outcome.applied:
            continue
        applied.append(
            AppliedModifier(
                id=modifier.id,
                description=describe_modifier(modifier, form_data),
                amount=outcome.amount,
                operation=modifier.calculation.operation,
            )
        )
        logger.debug(
            "Modifier applied",
            extra={"modifier_id": modifier.id, "price_before": str(current), "price_after": str(outcome.new_price)},
        )
        current = outcome.new_price
    return current, applied
