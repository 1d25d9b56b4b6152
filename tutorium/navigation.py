"""Sidebar navigation state.

Pages are addressed by path, mirroring the admin site routes. The only piece
of state is whether the collapsible "Transaction" section is open.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

NAV_ITEMS: List[Tuple[str, str]] = [
    ("/", "Dashboard"),
    ("/report", "Reports"),
    ("/user", "Users"),
]
TRANSACTION_SECTION = "/transaction"
TRANSACTION_ITEMS: List[Tuple[str, str]] = [("/transaction", "Payments")]


def is_path_active(current: str, href: str) -> bool:
    return current == href or current.startswith(href + "/")


def transaction_active(current: str) -> bool:
    return is_path_active(current, TRANSACTION_SECTION)


@dataclass(frozen=True)
class SidebarState:
    path: str = "/"
    transaction_open: bool = False


def navigate(state: SidebarState, path: str) -> SidebarState:
    # the section follows the route: opens on a transaction page, closes elsewhere
    return SidebarState(path=path, transaction_open=transaction_active(path))


def toggle_transaction_section(state: SidebarState) -> SidebarState:
    return SidebarState(path=state.path, transaction_open=not state.transaction_open)
