import numbers


class InvalidArgumentError(ValueError):
    """Raised when a sequence, query or benchmark setting is outside the supported domain."""


def check_search_inputs(values: list[int], query: int):
    if len(values) == 0:
        raise InvalidArgumentError("Cannot search an empty sequence.")
    if isinstance(query, bool) or not isinstance(query, numbers.Integral) or query < 0:
        raise InvalidArgumentError(f"Query must be a non-negative integer, got {query!r}.")
