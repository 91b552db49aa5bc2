"""Memory bank core: command grammar, typed document, pure operations.

    commands.py   "!save k v #tag" -> SaveCommand(...)
    models.py     MemoryBank / MemoryEntry, validated from raw JSON
    store.py      save / get / delete / list, plus apply(bank, command)
    messages.py   reply strings for the chat user

Nothing here does I/O; see ``membank.storage`` for fetching and writing the
document and ``membank.core`` for the glue.
"""
