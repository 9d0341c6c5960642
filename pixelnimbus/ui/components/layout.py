"""Layout building blocks shared across pages."""
from __future__ import annotations

from markupsafe import Markup, escape

NAV_LINKS = (
    ("Home", "/home"),
    ("Social Share", "/social-share"),
    ("Video Upload", "/video-upload"),
)


def navbar(*, active: str | None = None, signed_in: bool = False) -> Markup:
    links_html: list[str] = []
    for label, href in NAV_LINKS:
        state_class = "bg-blue-100 text-blue-600" if active == href else "text-gray-700 hover:bg-gray-100"
        links_html.append(
            f'<a href="{href}" class="rounded-lg px-3 py-2 text-sm font-medium transition-colors {state_class}">{escape(label)}</a>'
        )

    if signed_in:
        auth_control = (
            '<button id="nav-sign-out" type="button" data-sign-out="true" '
            'class="rounded-lg border px-3 py-2 text-sm font-medium text-gray-700 hover:bg-gray-100">Sign out</button>'
        )
    else:
        auth_control = (
            '<a href="/sign-in" class="rounded-lg border px-3 py-2 text-sm font-medium text-blue-600 hover:bg-blue-50">Sign in</a>'
        )

    return Markup(
        f"""
        <header class="border-b bg-white">
            <div class="mx-auto flex max-w-6xl items-center gap-4 px-4 py-4">
                <a href="/" class="text-2xl font-bold text-blue-600">PixelNimbus</a>
                <nav class="flex flex-1 gap-1">{"".join(links_html)}</nav>
                {auth_control}
            </div>
        </header>
        """
    )


__all__ = ["navbar", "NAV_LINKS"]
