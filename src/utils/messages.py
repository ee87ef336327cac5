from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user confirms logging out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired once a session exists, so screens can refresh user info
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired after any cart reducer ran (add, edit quantity, remove, clear, checkout).
    Post at App level when sent from outside the cart screen.
    """

    bubble = True


class CatalogChangedMessage(Message):
    """
    Fired by the admin product screen after create / update / delete
    """

    bubble = True


class OrdersChangedMessage(Message):
    """
    Fired when an order is placed or its status changes.
    Listened to by the admin order and overview screens
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
