from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user asks to log out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when a user logged in, so screens can refresh the sidebar
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired whenever a cart line is added, changed or removed.
    Post at App level when sent from outside CartScreen.
    """

    bubble = True


class CatalogLoadedMessage(Message):
    """
    Fired after a catalog load finished, successfully or not
    """

    bubble = True

    def __init__(self, ok: bool) -> None:
        super().__init__()
        self.ok = ok


class ProfileChangedMessage(Message):
    """
    Fired after profile, preferences or activity of the session user changed
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
