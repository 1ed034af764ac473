"""Bounds for integer path and query parameters.

Values beyond these never match a row and would overflow the database
driver, so they are rejected as malformed requests.
"""

# largest signed 64-bit integer, the widest primary key column type
MAX_ID = 2**63 - 1
MAX_PAGE = 2**31 - 1
