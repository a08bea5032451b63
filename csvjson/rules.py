"""
Fixed conversion rules.

This file exists to make non-goals explicit and enforceable.
No quoting, no escaping, no type coercion: a cell is the raw text between commas.
"""

DELIMITER = ","
LINE_SEPARATOR = "\n"
JSON_INDENT = 2  # pretty output and history export

HISTORY_STORAGE_KEY = "history"  # the single durable key

EXAMPLE_CSV = (
    "date,product,quantity,revenue\n"
    "2022-01-01,Widget A,10,100.00\n"
    "2022-01-02,Widget B,5,75.00\n"
    "2022-01-03,Widget A,8,80.00\n"
    "2022-01-04,Widget C,3,45.00"
)

INVALID_INPUT_MESSAGE = (
    "The input CSV is invalid. Please make sure it has at least one "
    "header and one row of data."
)
