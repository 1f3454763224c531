from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, DataTable, Input, Label, LoadingIndicator, Select

from catalog.view import SORT_OPTIONS, apply_view, catalog_stats, categories, stock_label
from utils.messages import CartChangedMessage, CatalogLoadedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen


class CatalogScreen(BaseScreen):
    """
    Product list with search, category filter, sorting and add-to-cart
    """

    BINDINGS = [
        Binding("plus", "change_qty(1)", "Add to Cart", show=True, key_display="+"),
        Binding("minus", "change_qty(-1)", "Remove one", show=True, key_display="-"),
    ]

    TABLE_COLUMNS = ("ID", "Product", "Category", "Price", "Stock", "", "In cart")

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Label("", id="label-catalog-stats")
        with Horizontal(id="div-catalog-controls"):
            yield Input(id="input-search", placeholder="Search products...")
            yield Select(
                [("All categories", "all")],
                value="all",
                allow_blank=False,
                id="select-category",
            )
            yield Select(
                [(label, key) for key, label in SORT_OPTIONS.items()],
                value="name",
                allow_blank=False,
                id="select-sort",
            )
        with Container(id="div-catalog-error"):
            yield Label("", id="label-catalog-error")
            with Horizontal():
                yield Button("Retry", id="btn-retry", variant="primary")
                yield Button("Dismiss", id="btn-dismiss-error")
        yield LoadingIndicator(id="loading-catalog")
        yield DataTable(id="table-products")
        yield Label("", id="label-no-products")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*self.TABLE_COLUMNS)

        self.query_one("#input-search").focus()

    async def refresh_content(self) -> None:
        catalog = self.app.state.catalog

        self.query_one("#loading-catalog").display = catalog.loading
        error_box = self.query_one("#div-catalog-error")
        error_box.display = catalog.error is not None
        self.query_one("#label-catalog-error", Label).update(catalog.error or "")

        stats = catalog_stats(catalog.products)
        self.query_one("#label-catalog-stats", Label).update(
            f"Total: {stats.total}   Available: {stats.available}   "
            f"Low stock: {stats.low_stock}   Sold out: {stats.out_of_stock}"
        )

        select_category = self.query_one("#select-category", Select)
        current = select_category.value
        cats = categories(catalog.products)
        select_category.set_options(
            [("All categories" if c == "all" else c, c) for c in cats]
        )
        if current in cats:
            select_category.value = current

        self.update_table()

    def update_table(self) -> None:
        state = self.app.state
        view = apply_view(
            state.catalog.products,
            self.query_one("#input-search", Input).value,
            self.query_one("#select-category", Select).value,
            self.query_one("#select-sort", Select).value,
        )

        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()
        table.add_rows(
            [
                (
                    p.pid,
                    p.name,
                    p.category,
                    format_price(p.price),
                    p.stock,
                    stock_label(p),
                    state.cart.get_item_quantity(p.pid) or "",
                )
                for p in view
            ]
        )
        if view:
            table.move_cursor(row=min(cursor_row, len(view) - 1))

        self.query_one("#label-no-products", Label).update(
            ""
            if view or state.catalog.loading
            else "No products match the selected filters."
        )

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.update_table()

    def on_select_changed(self, message: Select.Changed) -> None:
        self.update_table()

    def _selected_pid(self):
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        return table.get_row_at(table.cursor_row)[0]

    @on(DataTable.RowSelected)
    async def handle_row_selected(self) -> None:
        await self.action_change_qty(1)

    async def action_change_qty(self, delta: int) -> None:
        pid = self._selected_pid()
        if pid is None:
            return

        state = self.app.state
        product = state.catalog.get(pid)
        before = state.cart.get_item_quantity(pid)
        state.cart.add_to_cart(pid, delta)
        after = state.cart.get_item_quantity(pid)

        if after == before:
            if product and product.stock <= 0:
                self.notify(f"{product.name} is sold out.", severity="warning")
            elif delta > 0:
                self.notify("No more units in stock.", severity="warning")
            return

        self.notify(f"{product.name}: {after} in cart.")
        self.post_message(CartChangedMessage())
        self.update_table()

    @on(Button.Pressed, "#btn-retry")
    @work(exclusive=True)
    async def handle_retry(self) -> None:
        self.app.state.catalog.dismiss_error()
        self.app.state.catalog.loading = True
        await self.refresh_content()
        ok = await self.app.state.catalog.load()
        self.post_message(CatalogLoadedMessage(ok))

    @on(Button.Pressed, "#btn-dismiss-error")
    async def handle_dismiss_error(self) -> None:
        self.app.state.catalog.dismiss_error()
        await self.refresh_content()

    @on(CatalogLoadedMessage)
    async def handle_catalog_loaded(self, message: CatalogLoadedMessage) -> None:
        await self.refresh_content()
        if not message.ok:
            self.notify(self.app.state.catalog.error, severity="error")
