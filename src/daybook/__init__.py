"""daybook — content collection & ordering engine for "day N/chapter-M.md" trees."""
