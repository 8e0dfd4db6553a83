# joinery/quotes/routes.py

from flask import Blueprint, abort, jsonify, request

from joinery.crud import register_collection, request_data, save
from joinery.forms import JoineryItemForm, QuoteForm
from joinery.queries.joinery_items import list_quote_joinery_items
from joinery.queries.quote_projects import (
    delete_quote_project,
    get_quote_project,
    list_quotes,
    set_markup,
)
from joinery.quotes.utils import item_total, parse_markup, quote_totals, select_item
from joinery.store import require_store

bp = Blueprint('quotes', __name__)


register_collection(bp, 'list_quotes', '/', QuoteForm, list_quotes)


def _quote_or_404(quote_id):
    quote = get_quote_project(quote_id)
    if quote is None or not quote.get('quote'):
        abort(404)
    return quote


@bp.route('/<quote_id>')
def view_quote(quote_id):
    """
    Three panes built from one joinery-item collection:
      items    : the quote's joinery items
      selected : the item picked with ?item=<id> (no extra query)
      totals   : subtotal, markup and total
    """
    quote = _quote_or_404(quote_id)
    items = list_quote_joinery_items(quote_id)
    return jsonify(
        quote=quote,
        items=[{**i, 'total_with_markup': item_total(i, quote)} for i in items],
        selected=select_item(items, request.args.get('item')),
        totals=quote_totals(items, quote),
    )


@bp.route('/<quote_id>', methods=['POST', 'PATCH'])
def edit_quote(quote_id):
    require_store()
    return save(QuoteForm, record=_quote_or_404(quote_id))


@bp.route('/<quote_id>', methods=['DELETE'])
@bp.route('/<quote_id>/delete', methods=['POST'])
def delete_quote(quote_id):
    require_store()
    _quote_or_404(quote_id)
    delete_quote_project(quote_id)
    return jsonify(success=True)


@bp.route('/<quote_id>/markup', methods=['POST'])
def update_markup(quote_id):
    require_store()
    _quote_or_404(quote_id)
    value = parse_markup(request_data().get('markup_percentage'))
    quote = set_markup(quote_id, value)
    items = list_quote_joinery_items(quote_id)
    return jsonify(quote=quote, totals=quote_totals(items, quote))


register_collection(
    bp, 'add_joinery_item', '/<parent_id>/items', JoineryItemForm,
    parent_field='quote_proj_id', defaults={'quote': True},
)
