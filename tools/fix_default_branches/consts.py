import platform

import httpx

GITHUB_API_URL = "https://api.github.com"

# Largest page size accepted by the GitHub REST API
PER_PAGE = 100

USER_AGENT = (
    "fix-default-branches (https://github.com/dandi/dandisets) httpx/{} {}/{}".format(
        httpx.__version__,
        platform.python_implementation(),
        platform.python_version(),
    )
)

# The multi-select shows this many fewer rows than the terminal has ...
CHOICE_ROW_MARGIN = 5

# ... but never fewer than this many
MIN_CHOICE_ROWS = 10

# Number of times a failed listing request is retried before giving up
RETRY_ATTEMPTS = 3
