import unittest

from db.models import Cart, Product
from shop import cart as cart_ops

CASE = Product(1, "Clear iPhone 15 Case", "iphone-cases", 2500, "", "Clear")
SHADES = Product(4, "Aviator Sunglasses", "sunglasses", 6500, "", "Aviator")


class CartTestCase(unittest.TestCase):
    def test_adding_twice_increments_single_line(self):
        cart = cart_ops.add_to_cart(cart_ops.add_to_cart(Cart(), CASE), CASE)
        self.assertEqual(len(cart), 1)
        self.assertEqual(cart.lines[0].quantity, 2)
        self.assertEqual(cart_ops.total_price(cart), 2 * CASE.price)
        self.assertEqual(cart_ops.total_items(cart), 2)

    def test_reducers_do_not_mutate_input(self):
        empty = Cart()
        one = cart_ops.add_to_cart(empty, CASE)
        self.assertEqual(len(empty), 0)
        two = cart_ops.add_to_cart(one, CASE)
        self.assertEqual(one.lines[0].quantity, 1)
        self.assertEqual(two.lines[0].quantity, 2)

    def test_line_keeps_product_snapshot(self):
        cart = cart_ops.add_to_cart(Cart(), CASE)
        repriced = Product(1, CASE.name, CASE.category, 9999, "", "")
        cart = cart_ops.add_to_cart(cart, repriced)
        # existing line is incremented, its product copy is not replaced
        self.assertEqual(cart.lines[0].product.price, 2500)

    def test_update_quantity_sets_value(self):
        cart = cart_ops.add_to_cart(Cart(), CASE)
        cart = cart_ops.update_quantity(cart, CASE.id, 5)
        self.assertEqual(cart_ops.total_items(cart), 5)
        cart = cart_ops.update_quantity(cart, CASE.id, 3)
        self.assertEqual(cart_ops.total_items(cart), 3)

    def test_update_quantity_zero_or_negative_removes(self):
        cart = cart_ops.add_to_cart(cart_ops.add_to_cart(Cart(), CASE), SHADES)
        cart = cart_ops.update_quantity(cart, SHADES.id, 4)

        after_zero = cart_ops.update_quantity(cart, CASE.id, 0)
        self.assertIsNone(cart_ops.find_line(after_zero, CASE.id))
        self.assertEqual(cart_ops.total_items(after_zero), 4)

        after_negative = cart_ops.update_quantity(cart, SHADES.id, -1)
        self.assertEqual([l.product.id for l in after_negative], [CASE.id])

    def test_update_quantity_unknown_product_is_noop(self):
        cart = cart_ops.add_to_cart(Cart(), CASE)
        self.assertEqual(cart_ops.update_quantity(cart, 999, 3), cart)

    def test_remove_and_clear(self):
        cart = cart_ops.add_to_cart(cart_ops.add_to_cart(Cart(), CASE), SHADES)
        self.assertIs(cart_ops.remove_from_cart(cart, 999), cart)

        cart = cart_ops.remove_from_cart(cart, CASE.id)
        self.assertEqual(cart_ops.total_price(cart), SHADES.price)

        cart = cart_ops.clear_cart(cart)
        self.assertFalse(cart)
        self.assertEqual(cart_ops.total_items(cart), 0)
        self.assertEqual(cart_ops.total_price(cart), 0)

    def test_lines_keep_insertion_order(self):
        cart = cart_ops.add_to_cart(Cart(), SHADES)
        cart = cart_ops.add_to_cart(cart, CASE)
        cart = cart_ops.add_to_cart(cart, SHADES)
        self.assertEqual([l.product.id for l in cart], [SHADES.id, CASE.id])
