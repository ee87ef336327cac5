"""
Cart reducers. Every function takes the current Cart and returns a new one;
the caller (AppState) decides which Cart is current.
"""

from db.models import Cart, CartLine, Product


def add_to_cart(cart: Cart, product: Product) -> Cart:
    for i, line in enumerate(cart.lines):
        if line.product.id == product.id:
            bumped = CartLine(line.product, line.quantity + 1)
            return Cart(cart.lines[:i] + (bumped,) + cart.lines[i + 1 :])
    return Cart(cart.lines + (CartLine(product, 1),))


def remove_from_cart(cart: Cart, product_id: int) -> Cart:
    kept = tuple(line for line in cart.lines if line.product.id != product_id)
    if len(kept) == len(cart.lines):
        return cart
    return Cart(kept)


def update_quantity(cart: Cart, product_id: int, quantity: int) -> Cart:
    """Set (not increment) a line's quantity; zero or less removes it."""
    if quantity <= 0:
        return remove_from_cart(cart, product_id)
    return Cart(
        tuple(
            CartLine(line.product, quantity) if line.product.id == product_id else line
            for line in cart.lines
        )
    )


def clear_cart(cart: Cart) -> Cart:
    return Cart()


def total_items(cart: Cart) -> int:
    return sum(line.quantity for line in cart.lines)


def total_price(cart: Cart) -> int:
    return sum(line.line_total for line in cart.lines)


def find_line(cart: Cart, product_id: int) -> CartLine | None:
    for line in cart.lines:
        if line.product.id == product_id:
            return line
    return None
