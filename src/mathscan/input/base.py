from abc import ABC, abstractmethod
from typing import Any, Callable, List


class InputJax(ABC):
    """
    A notation source: finds math in a document and compiles it.

    Sources with process_strings = True search the strings produced by
    DomStrings; the others are handed the container node itself and report
    the locations of what they find.
    """

    name = "generic"
    process_strings = True

    def __init__(self):
        self.adaptor = None
        self.pre_filters: List[Callable] = []
        self.post_filters: List[Callable] = []

    def set_adaptor(self, adaptor):
        self.adaptor = adaptor

    def find_math(self, which) -> List[Any]:
        return []

    @abstractmethod
    def compile(self, math):
        pass

    def execute_filters(self, filters: List[Callable], math, data):
        """
        Run each filter on {"math": math, "data": data}; filters may replace
        args["data"]. Returns the final data.
        """
        args = {"math": math, "data": data}
        for f in filters:
            f(args)
        return args["data"]
