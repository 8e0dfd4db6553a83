# joinery/quotes/utils.py

"""Totals for the quote detail page."""

from joinery.errors import ValidationError

DEFAULT_MARKUP = 40.0
MAX_MARKUP = 1000


def markup_for(quote) -> float:
    """Markup percentage stored on the quote, 40 when unset."""
    value = (quote or {}).get('markup_percentage')
    if value is None or value == '':
        return DEFAULT_MARKUP
    try:
        return float(value)
    except (TypeError, ValueError):
        return DEFAULT_MARKUP


def parse_markup(raw) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = None
    if value is None or value < 0 or value > MAX_MARKUP:
        raise ValidationError({
            'markup_percentage': f'Markup percentage must be between 0 and {MAX_MARKUP}',
        })
    return value


def quote_totals(items, quote) -> dict:
    """
    Running total across the quote's joinery items.
    Sums the stored calculated costs, then applies the quote's markup:
      total = subtotal * (1 + markup / 100)
    """
    cabinet     = sum(i.get('calculated_cabinet_cost') or 0 for i in items)
    specialized = sum(i.get('calculated_specialized_cost') or 0 for i in items)
    hours       = sum(i.get('calculated_hours_cost') or 0 for i in items)
    subtotal    = cabinet + specialized + hours
    markup      = markup_for(quote)
    return {
        'cabinet_cost'      : cabinet,
        'specialized_cost'  : specialized,
        'hours_cost'        : hours,
        'subtotal'          : subtotal,
        'markup_percentage' : markup,
        'markup_amount'     : subtotal * markup / 100,
        'total'             : subtotal * (1 + markup / 100),
    }


def item_total(item, quote) -> float:
    """One joinery item's stored total with the quote markup applied."""
    return (item.get('calculated_total_cost') or 0) * (1 + markup_for(quote) / 100)


def select_item(items, item_id):
    """Pick the selected joinery item out of the already-loaded collection."""
    if not item_id:
        return None
    return next((i for i in items if i['id'] == item_id), None)
