# --- src/dcsim_core/units.py ---
import pint
import logging

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")


def to_magnitude(raw_value, expected_dim: str) -> float:
    """
    Converts a number or a quantity string (e.g. "4.7 kohm") to a float expressed in
    the base unit `expected_dim`. Bare numbers are taken to already be in that unit.

    Raises:
        pint.DimensionalityError: If the value's units are incompatible.
        pint.UndefinedUnitError: If the string names an unknown unit.
        ValueError, TypeError: If the value cannot be read as a real number.
    """
    if isinstance(raw_value, bool):
        raise TypeError(f"Boolean '{raw_value}' is not a valid numeric value.")
    if isinstance(raw_value, (int, float)):
        return float(raw_value)

    text = str(raw_value).strip()
    try:
        # Plain numeric strings, including "inf", carry no unit.
        return float(text)
    except ValueError:
        pass

    qty = Quantity(text)
    if qty.dimensionless:
        return float(qty.to("dimensionless").magnitude)
    if not qty.is_compatible_with(expected_dim):
        raise pint.DimensionalityError(qty.units, ureg.Unit(expected_dim))
    return float(qty.to(expected_dim).magnitude)
