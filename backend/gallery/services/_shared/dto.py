# comments in English; reST docstrings strict
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageOut(Generic[T]):
    """
    One page of results with offset-pagination metadata.

    :param page_number: Current page (1-based).
    :type page_number: int
    :param page_size: Requested page size; ``len(data) <= page_size``.
    :type page_size: int
    :param total_items: Total rows matching the same filters.
    :type total_items: int
    :param data: Items of the current page.
    :type data: Sequence[T]
    """

    page_number: int
    page_size: int
    total_items: int
    data: Sequence[T]
