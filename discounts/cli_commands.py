"""
Flask CLI commands for discount management.

Commands:
- flask attach-discount: Attach a discount to a cart
- flask list-discounts: Show the discounts active for a cart
"""

import click
from discounts.database import get_session
from discounts.exceptions import NotFoundError
from discounts.services.discount_service import get_discount, get_discounts_for_cart, apply_to_cart


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('attach-discount')
    @click.argument('cart_id', type=int)
    @click.argument('discount_id', type=int)
    def attach_discount(cart_id, discount_id):
        """Attach a discount to a cart."""
        session = get_session()
        try:
            discount = get_discount(session, discount_id)
        except NotFoundError as e:
            click.echo(click.style(f'❌ {e.message}', fg='red'))
            raise SystemExit(1)

        if discount.is_expired():
            click.echo(click.style(f'❌ El descuento {discount.code} está vencido.', fg='red'))
            raise SystemExit(1)

        try:
            apply_to_cart(session, discount, cart_id)
            session.commit()
        except Exception as e:
            session.rollback()
            click.echo(click.style(f'❌ Error al aplicar descuento: {str(e)}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style(f'✅ Descuento {discount.code} aplicado al carrito {cart_id}', fg='green'))

    @app.cli.command('list-discounts')
    @click.argument('cart_id', type=int)
    @click.option('--no-auto-apply', is_flag=True, help='Exclude auto-apply discounts')
    def list_discounts(cart_id, no_auto_apply):
        """List the discounts active for a cart."""
        discounts = get_discounts_for_cart(get_session(), cart_id, include_auto_apply=not no_auto_apply)
        if not discounts:
            click.echo(f'Sin descuentos para el carrito {cart_id}')
            return

        for d in discounts:
            value = f'{d.amount} off' if d.is_amount_off else f'{d.percent}% off'
            flags = ' (auto)' if d.auto_apply else ''
            click.echo(f'{d.code}: {value} [{d.applies_to.value}, max {d.max_usage}]{flags}')
