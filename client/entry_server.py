"""Server render entry for the console page."""

from html import escape

TITLE = "Realtime Console"


def render(url):
    return {
        "html": (
            '<main class="console">'
            f"<h1>{escape(TITLE)}</h1>"
            '<p class="status" id="status">Session idle</p>'
            '<button id="start" type="button">Start session</button>'
            '<button id="stop" type="button" disabled>End session</button>'
            '<ul class="events" id="events"></ul>'
            f'<footer data-url="{escape(url)}"></footer>'
            "</main>"
        )
    }
