import logging

import pytest

from mathscan.dom.soup import SoupAdaptor
from mathscan.dom.strings import DomStrings


@pytest.fixture(scope="session", autouse=True)
def quiet_parser_logging():
    # parser tracing is very chatty at debug level
    logging.getLogger("mathscan.parser").setLevel(logging.INFO)


@pytest.fixture
def adaptor():
    return SoupAdaptor()


@pytest.fixture
def parse_html(adaptor):
    def parse(html):
        document = adaptor.parse(html)
        return document, adaptor.body(document)
    return parse


@pytest.fixture
def dom_strings(adaptor):
    return DomStrings(adaptor)
