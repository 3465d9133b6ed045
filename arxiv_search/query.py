"""Conversion of search queries into arXiv API request parameters."""

from .models import Query


def build_params(query: Query) -> dict[str, str]:
    """Build the query-string parameters for ``query``.

    ``search_query`` is omitted for an empty expression and ``id_list`` when no
    ID list was given. An empty but present ID list is sent as an empty value.

    Args:
        query: Search request

    Returns:
        Parameter name to value, in request order
    """
    params: dict[str, str] = {}
    if query.query:
        params["search_query"] = query.query
    if query.id_list is not None:
        params["id_list"] = ",".join(query.id_list)
    params["start"] = str(query.start)
    params["max_results"] = str(query.max_results)
    return params
