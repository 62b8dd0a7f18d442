from __future__ import annotations

# GitHub REST calls
HTTP_TIMEOUT_SECONDS = 30.0

# Local `gh auth token` lookup
GH_TOKEN_TIMEOUT_SECONDS = 10.0

# Page size for paginated list endpoints (GitHub maximum)
PER_PAGE = 100
