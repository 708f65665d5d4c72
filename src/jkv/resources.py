"""Static resources for jkv."""

DESCRIPTION = "Edit the top-level key/value pairs of a JSON file in the terminal"

EPILOG = """\
keys:
  up/down j/k   move the selection
  enter e       edit the selected value
  n             add a new key/value pair
  d del         delete the selected pair
  ctrl+s w      save
  p             toggle the JSON preview
  q             quit (asks to save unsaved changes)

while editing:
  tab           switch between key and value
  ctrl+t        change the value type
  space         toggle a boolean value
  enter / esc   submit / cancel
"""

APP_CSS = """
Screen {
    layout: vertical;
}
#main {
    height: 1fr;
}
#editor {
    width: 1fr;
    height: 1fr;
    border: solid $accent;
}
#preview-panel {
    width: 1fr;
    height: 1fr;
    border: solid $accent 50%;
    padding: 0 1;
}
#preview-panel.collapsed {
    display: none;
}
#hint-bar {
    height: auto;
    max-height: 3;
    padding: 0 1;
    background: $surface;
    border-top: solid $accent 50%;
}
"""
