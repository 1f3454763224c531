from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import DataTable, Input, Label, Select

from accounts.activity import (
    ACTIVITY_TYPES,
    activity_counts,
    filter_activities,
    paginate,
)
from utils.pure import format_timestamp
from views.base_screen import AccountScreen

DATE_RANGES = [
    ("Any time", "all"),
    ("Last 7 days", "7"),
    ("Last 30 days", "30"),
    ("Last 90 days", "90"),
]


class ActivityScreen(AccountScreen):
    """
    The session user's activity history, filterable and paged
    """

    page_idx = reactive(1, init=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield from self.compose_notice()
        with Vertical(id="div-account-content"):
            with Horizontal(id="div-activity-filters"):
                yield Select(
                    [(label, key) for key, label in ACTIVITY_TYPES.items()],
                    value="all",
                    allow_blank=False,
                    id="select-activity-type",
                )
                yield Select(
                    DATE_RANGES, value="all", allow_blank=False, id="select-activity-days"
                )
                yield Input(placeholder="Search activity...", id="input-activity-search")
            yield Label("", id="label-activity-counts")
            yield DataTable(id="table-activity")
            with Horizontal():
                yield Input("1", id="input-page", type="integer")  # page idx start from 1
                yield Label(" / 1", id="label-total-page-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("When", "Type", "Action", "Description", "Status")

    async def refresh_account(self) -> None:
        self.update_table()

    def update_table(self) -> None:
        user = self.app.state.session.user
        if user is None:
            return

        days = self.query_one("#select-activity-days", Select).value
        filtered = filter_activities(
            user.activity,
            type=self.query_one("#select-activity-type", Select).value,
            days=None if days == "all" else int(days),
            search=self.query_one("#input-activity-search", Input).value,
        )
        page_items, page_cnt = paginate(filtered, self.page_idx)

        counts = activity_counts(filtered)
        self.query_one("#label-activity-counts", Label).update(
            f"Total: {len(filtered)}   Orders: {counts.get('order', 0)}   "
            f"Logins: {counts.get('login', 0)}   Reviews: {counts.get('review', 0)}"
        )

        table = self.query_one(DataTable)
        table.clear()
        table.add_rows(
            [
                (
                    format_timestamp(a.timestamp),
                    ACTIVITY_TYPES.get(a.type, a.type),
                    a.action,
                    a.description,
                    a.status,
                )
                for a in page_items
            ]
        )
        self.query_one("#label-total-page-cnt", Label).update(f" / {page_cnt}")
        if self.page_idx > page_cnt:
            self.page_idx = page_cnt

    def on_select_changed(self, message: Select.Changed) -> None:
        self.page_idx = 1
        self.update_table()

    def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-activity-search":
            self.page_idx = 1
            self.update_table()
        elif message.input.id == "input-page" and message.value:
            try:
                self.page_idx = max(int(message.value), 1)
            except ValueError:
                return

    def watch_page_idx(self, _, new_page_idx):
        page_input = self.query_one("#input-page", Input)
        if page_input.value != str(new_page_idx):
            page_input.value = str(new_page_idx)
        self.update_table()
