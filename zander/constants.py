"""Constants shared across the state engine and the persistence backends."""

from __future__ import annotations

# -- Persistence --------------------------------------------------------------

STORAGE_KEY = "zander-svelte:v1"
PROBE_KEY = "__zander_test__"

# Export bundles are only accepted when their version matches exactly.
EXPORT_VERSION = "zander-v1"

# -- Categories ---------------------------------------------------------------

DEFAULT_CATEGORY_NAME = "New category"
DEFAULT_CATEGORY_COLOR = "#ffffff"

MOVE_UP = "up"
MOVE_DOWN = "down"
MOVE_DIRECTIONS = (MOVE_UP, MOVE_DOWN)

# -- Navigation ---------------------------------------------------------------

VIEWS = ("bookmarks", "settings", "about")
DEFAULT_VIEW = "bookmarks"

SETTINGS_PAGES = ("categories", "home", "themes", "data", "reset")
