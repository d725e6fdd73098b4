# Overview: Shared page/pageSize query-string parsing for list endpoints.

from flask import current_app, request

from ..validation import parse_positive_int


def page_args() -> tuple[int, int]:
    """(page, page_size) from the query string; page_size is capped at MAX_PAGE_SIZE."""
    page = parse_positive_int(request.args.get("page"), name="page", default=1)
    page_size = parse_positive_int(
        request.args.get("pageSize"),
        name="pageSize",
        default=current_app.config["DEFAULT_PAGE_SIZE"],
    )
    return page, min(page_size, current_app.config["MAX_PAGE_SIZE"])
