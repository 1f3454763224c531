from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Label, Rule

from utils.messages import CartChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_dialog import ConfirmModal


class CartScreen(BaseScreen):
    """
    cart lines with quantity controls, valued at current catalog prices
    """

    BINDINGS = [
        Binding("plus", "change_qty(1)", "One more", show=True, key_display="+"),
        Binding("minus", "change_qty(-1)", "One less", show=True, key_display="-"),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-cart")
        yield Label("Your cart is empty.", id="label-cart-empty")
        yield Label("Total Cart Value: $0", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Remove Item", id="btn-remove-item", variant="warning")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Product", "Qty", "Unit price", "Subtotal")

    async def refresh_content(self) -> None:
        state = self.app.state
        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()

        rows = []
        for line in sorted(state.cart.lines, key=lambda x: x.pid):
            product = state.catalog.get(line.pid)
            name = product.name if product else f"Product {line.pid}"
            price = product.price if product else 0.0
            rows.append(
                (
                    line.pid,
                    name,
                    line.qty,
                    format_price(price),
                    format_price(round(price * line.qty, 2)),
                )
            )
        table.add_rows(rows)
        if rows:
            table.move_cursor(row=min(cursor_row, len(rows) - 1))

        self.query_one("#label-cart-empty").display = not rows
        self.query_one("#label-cart-total", Label).update(
            f"Total Cart Value: {format_price(state.cart.total_price())}"
            f"  ({state.cart.total_items} item(s))"
        )

    def _selected_pid(self):
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        return table.get_row_at(table.cursor_row)[0]

    async def _cart_changed(self) -> None:
        self.post_message(CartChangedMessage())
        await self.refresh_content()

    async def action_change_qty(self, delta: int) -> None:
        pid = self._selected_pid()
        if pid is None:
            return
        before = self.app.state.cart.get_item_quantity(pid)
        self.app.state.cart.add_to_cart(pid, delta)
        if self.app.state.cart.get_item_quantity(pid) == before:
            self.notify("No more units in stock.", severity="warning")
            return
        await self._cart_changed()

    @on(Button.Pressed, "#btn-remove-item")
    @work()
    async def handle_remove_item(self):
        pid = self._selected_pid()
        if pid is None:
            self.notify("Cart is empty.", severity="warning")
            return

        remove_confirmed = await self.app.push_screen_wait(
            ConfirmModal("Do you really want to remove this item from cart?")
        )
        if remove_confirmed:
            self.app.state.cart.remove(pid)
            await self._cart_changed()
            self.notify("Item removed from cart.", severity="information")

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if not self.app.state.cart.lines:
            self.app.notify("Cart is empty.", severity="warning")
            return

        remove_confirmed = await self.app.push_screen_wait(
            ConfirmModal("Do you really want to remove all items from cart?", tone="danger")
        )
        if remove_confirmed:
            self.app.state.cart.clear()
            await self._cart_changed()
