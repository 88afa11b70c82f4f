import marimo

__generated_with = "0.13.10"
app = marimo.App(width="medium", app_title="Directory Watcher")


# ---------------------------------------------------------------------------
# Bootstrap: vault, plugin, file feed
# ---------------------------------------------------------------------------


@app.cell
def _setup():
    import os
    import sys
    from pathlib import Path

    _ROOT = Path(__file__).parent.parent
    _SRC = _ROOT / "src"
    VAULT_DIR = Path(os.environ.get("DIRWATCH_VAULT", _ROOT / "vault"))

    if str(_SRC) not in sys.path:
        sys.path.insert(0, str(_SRC))

    from dirwatch.plugin import fire_hook
    from dirwatch.watcher import load_plugins, start_observer

    VAULT_DIR.mkdir(parents=True, exist_ok=True)
    _plugins = load_plugins(VAULT_DIR)
    fire_hook(_plugins, "on_load", vault_dir=VAULT_DIR)
    _observer = start_observer(VAULT_DIR, _plugins)
    watcher = _plugins[0]

    return VAULT_DIR, watcher


@app.cell
def _imports():
    import marimo as mo

    return (mo,)


# ---------------------------------------------------------------------------
# Reactive state
# ---------------------------------------------------------------------------


@app.cell
def _state(mo):
    revision = mo.state(0)
    return (revision,)


# ---------------------------------------------------------------------------
# Context menu: pick a folder / note from the vault
# ---------------------------------------------------------------------------


@app.cell
def _pickers(mo, VAULT_DIR, watcher, revision):
    from dirwatch.note import DirectoryEntry, FileEntry

    bump = revision[1]

    folders = sorted(
        p.relative_to(VAULT_DIR).as_posix()
        for p in VAULT_DIR.rglob("*")
        if p.is_dir() and not p.relative_to(VAULT_DIR).as_posix().startswith(".")
    )
    notes = sorted(
        p.relative_to(VAULT_DIR).as_posix()
        for p in VAULT_DIR.rglob("*")
        if p.is_file() and watcher.context_actions(FileEntry(p.relative_to(VAULT_DIR).as_posix()))
    )

    folder_pick = mo.ui.dropdown(options=folders, label="Folder")
    note_pick = mo.ui.dropdown(options=notes, label="Note")

    def _apply(entry):
        for action in watcher.context_actions(entry):
            action.run()
        bump(lambda n: n + 1)

    folder_button = mo.ui.button(
        label="Set as watched directory",
        on_click=lambda _: _apply(DirectoryEntry(folder_pick.value)) if folder_pick.value else None,
    )
    note_button = mo.ui.button(
        label="Set as file to update",
        on_click=lambda _: _apply(FileEntry(note_pick.value)) if note_pick.value else None,
    )

    pickers = mo.vstack(
        [
            mo.hstack([folder_pick, folder_button], align="center"),
            mo.hstack([note_pick, note_button], align="center"),
        ],
        gap="8px",
    )
    return (pickers,)


# ---------------------------------------------------------------------------
# Settings panel (read-only)
# ---------------------------------------------------------------------------


@app.cell
def _settings(mo, watcher, revision):
    _ = revision[0]()

    rows = [
        mo.vstack(
            [
                mo.md(f"**{row.name}**"),
                mo.md(f"_{row.description}_"),
                mo.ui.text(value=row.value, placeholder=row.placeholder, disabled=True, full_width=True),
            ],
            gap="2px",
        )
        for row in watcher.settings_rows()
    ]

    last = watcher.flusher.last_result if watcher.flusher else None
    if last is None:
        status = mo.md("_No flush yet._")
    elif last.error is not None:
        status = mo.callout(mo.md(f"Last flush failed: {last.error.message}"), kind="danger")
    else:
        status = mo.callout(mo.md(f"Last flush added {len(last.lines)} line(s)."), kind="success")

    settings_panel = mo.vstack([mo.md("## Settings"), *rows, status], gap="12px")
    return (settings_panel,)


@app.cell
def _layout(mo, pickers, settings_panel):
    mo.vstack([settings_panel, mo.divider(), mo.md("## Context menu"), pickers])
    return


if __name__ == "__main__":
    app.run()
