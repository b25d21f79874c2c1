from __future__ import annotations

msg = (
    "mongocursor does not support building via setup.py, use python -m pip install <path/to/mongocursor> instead. If "
    "this is an editable install (-e) please upgrade to pip>=21.3 first: python -m pip install --upgrade pip"
)

raise RuntimeError(msg)
