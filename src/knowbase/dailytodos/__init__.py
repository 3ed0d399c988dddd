"""Daily todos: a per-day checklist with lazy rollover.

Layout:
    <storage_dir>/.knowledgebase/
    ├── daily-todos.json               # Active items + lastRolloverDate
    ├── daily-todos-archive.json       # Archived items + retentionDays
    └── *.json.tmp                     # Transient, renamed over the target on save

Once per calendar day the first access rolls the list over: completed items
move to the archive, incomplete ones climb one priority rung and count one more
day overdue. Archived items are purged after the retention window.
"""
