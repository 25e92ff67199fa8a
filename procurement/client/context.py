"""Per-session client state, passed explicitly to forms and feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from procurement.client.api import ApiClient

THEMES = ("light", "dark")


@dataclass
class ClientContext:
    """Holds the API client, the signed-in user and UI preferences for one session."""

    api: ApiClient
    user: dict[str, Any] | None = None
    theme: str = "light"
    listeners: list = field(default_factory=list)

    def __post_init__(self):
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme {self.theme!r}")

    @property
    def role(self) -> str | None:
        return self.user.get("role") if self.user else None

    @property
    def user_id(self) -> str | None:
        return self.user.get("id") if self.user else None

    def sign_in(self, email: str, password: str) -> dict[str, Any]:
        self.user = self.api.login(email, password)
        return self.user

    def sign_out(self) -> None:
        self.user = None
        self.api.token = None

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme {theme!r}")
        self.theme = theme
        for listener in self.listeners:
            listener(theme)

    def toggle_theme(self) -> str:
        self.set_theme("dark" if self.theme == "light" else "light")
        return self.theme
