from roiboard.ordering.comparator import Ordering, compare, sort_key, sort_tasks

__all__ = ["Ordering", "compare", "sort_key", "sort_tasks"]
