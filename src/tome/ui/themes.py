"""Textual CSS themes for tome."""

APP_CSS = """
/* ── Global ────────────────────────────────── */
Screen {
    background: $surface;
}

/* ── Reader Screen ─────────────────────────── */
#reader-header {
    dock: top;
    height: 1;
    background: $primary;
    color: $text;
    padding: 0 2;
    text-style: bold;
}

#reader-controls {
    dock: top;
    height: 1;
    padding: 0 2;
    background: $surface-darken-1;
}

#content-scroll {
    height: 1fr;
    padding: 1 4;
}

#content-text {
    width: 100%;
}

#reader-message {
    dock: bottom;
    height: 1;
    padding: 0 2;
    color: $accent;
}

#page-input-bar {
    dock: bottom;
    height: 3;
    padding: 0 2;
    background: $surface-darken-1;
    display: none;
}

#page-input-bar.visible {
    display: block;
}

#reader-dock {
    dock: bottom;
    height: 3;
    padding: 1 2;
    background: $primary-darken-2;
    color: $text;
}

#reader-dock.hidden {
    display: none;
}

ReaderScreen.fullscreen #reader-header,
ReaderScreen.fullscreen #reader-controls,
ReaderScreen.fullscreen #reader-message,
ReaderScreen.fullscreen Footer {
    display: none;
}

/* ── Error / loading ───────────────────────── */
.error-text {
    color: $error;
    text-style: bold;
}

.loading-text {
    color: $warning;
    text-style: italic;
}

/* ── Open book dialog ──────────────────────── */
OpenBookScreen {
    align: center middle;
}

#open-book-dialog {
    width: 60;
    height: 11;
    background: $surface;
    border: solid $primary;
    padding: 1 2;
}

#open-book-title {
    text-align: center;
    text-style: bold;
    margin-bottom: 1;
}

#open-book-buttons {
    align: center middle;
    height: 3;
}

#open-book-buttons Button {
    margin: 0 2;
}
"""
