from __future__ import annotations

OK = 0
ERR_FAIL = 1
ERR_USAGE = 2
ERR_VALIDATION = 3
ERR_CONFIG = 4
ERR_IO = 5
ERR_WORKFLOW = 6
ERR_INTERNAL = 99
