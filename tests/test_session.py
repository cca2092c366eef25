import unittest

from mathscan.document.math_item import State, proto_item
from mathscan.document.session import DocumentSession, DocumentState, Reporter
from mathscan.dom.soup import SoupAdaptor
from mathscan.input import InputJax, MathMLInput, TexInput
from mathscan.mml.nodes import node, token
from mathscan.parser.errors import TexError


class MockReporter(Reporter):
    def __init__(self):
        self.logs = []
        self.errors = []
        self.compiled = []

    def log(self, message):
        self.logs.append(message)

    def error(self, message):
        self.errors.append(message)

    def math_compiled(self, math, success, error=None):
        self.compiled.append((math.math, success, error))


class CountingSource(InputJax):
    name = "counting"

    def __init__(self):
        super().__init__()
        self.searches = 0

    def find_math(self, strings):
        self.searches += 1
        return []

    def compile(self, math):
        raise AssertionError("nothing to compile")


class PastTheEndSource(InputJax):
    """Reports one match whose end lies beyond its string."""

    name = "past-the-end"

    def find_math(self, strings):
        return [proto_item("$", "z", "$", 0, 0, len(strings[0]) + 5)]

    def compile(self, math):
        return node("math", [token("mi", math.math)])


class TestDocumentSession(unittest.TestCase):
    def setUp(self):
        self.adaptor = SoupAdaptor()
        self.reporter = MockReporter()

    def session(self, html, input_jax=None):
        document = self.adaptor.parse(html)
        if input_jax is None:
            input_jax = TexInput()
        return DocumentSession(document, self.adaptor, input_jax, reporter=self.reporter)

    def test_render_inline_math(self):
        session = self.session("<p>Let $x$ be</p>").render()
        self.assertEqual(
            str(session.document), '<p>Let <math data-mathscan="TeX"><mi>x</mi></math> be</p>'
        )
        self.assertEqual(session.state, DocumentState.RENDERED)
        self.assertEqual(session.math[0].state, State.INSERTED)

    def test_render_display_math(self):
        session = self.session("<p>$$a+1$$</p>").render()
        math = session.document.find("math")
        self.assertEqual(self.adaptor.get_attribute(math, "display"), "block")
        self.assertEqual(self.adaptor.get_attribute(math, "data-mathscan"), "TeX")
        self.assertEqual("".join(map(str, math.contents)), "<mi>a</mi><mo>+</mo><mn>1</mn>")

    def test_two_items_in_one_text_node(self):
        session = self.session("<p>$a$ and $b$</p>").render()
        self.assertEqual(
            str(session.document),
            '<p><math data-mathscan="TeX"><mi>a</mi></math> and '
            '<math data-mathscan="TeX"><mi>b</mi></math></p>',
        )

    def test_math_across_line_break(self):
        session = self.session("<p>x $a<br>b$ y</p>").render()
        self.assertEqual(
            str(session.document),
            '<p>x <math data-mathscan="TeX"><mi>a</mi><mi>b</mi></math> y</p>',
        )

    def test_comment_before_math_is_kept(self):
        html = "<p>a<!--c-->$x$ b</p>"
        session = self.session(html).render()
        self.assertEqual(
            str(session.document), '<p>a<!--c--><math data-mathscan="TeX"><mi>x</mi></math> b</p>'
        )
        session.remove_from_document(restore=True)
        self.assertEqual(str(session.document), html)

    def test_wbr_before_math_is_kept(self):
        session = self.session("<p>a<wbr>$x$</p>").render()
        wbr = session.document.find("wbr")
        self.assertIsNotNone(wbr)
        self.assertEqual(self.adaptor.kind(wbr.next_sibling), "math")
        self.assertEqual(str(wbr.previous_sibling), "a")

    def test_math_at_end_of_previous_text_node(self):
        document = self.adaptor.parse("<p>x</p>")
        document.p.append("y ")
        document.p.append("$z$")
        session = DocumentSession(document, self.adaptor, TexInput(), reporter=self.reporter)
        session.render()
        self.assertEqual(
            str(document), '<p>xy <math data-mathscan="TeX"><mi>z</mi></math></p>'
        )

    def test_unresolved_item_is_kept_but_not_inserted(self):
        html = "<p>short</p>"
        session = self.session(html, PastTheEndSource()).render()
        self.assertEqual([item.math for item in session.math], ["z"])
        self.assertFalse(session.math[0].resolved)
        self.assertEqual(session.math[0].state, State.TYPESET)
        self.assertEqual(str(session.document), html)
        self.assertIn("Skipping 'z': position not in the document", self.reporter.logs)

    def test_discover_is_idempotent(self):
        source = CountingSource()
        session = self.session("<p>some text</p><p>more</p>", source)
        session.discover()
        before = list(session.math)
        session.discover()
        self.assertEqual(source.searches, 1)
        self.assertEqual(list(session.math), before)
        session.reset()
        self.assertEqual(session.state, DocumentState.UNINITIALIZED)
        session.discover()
        self.assertEqual(source.searches, 2)

    def test_compile_errors_are_recorded(self):
        session = self.session("<p>$\\foo$ and $y$</p>").render()
        self.assertEqual([item.math for item in session.math], ["y"])
        self.assertEqual(len(session.errors), 1)
        item, error = session.errors[0]
        self.assertEqual(item.math, "\\foo")
        self.assertIsInstance(error, TexError)
        self.assertEqual(error.id, "UndefinedControlSequence")
        self.assertIn(("\\foo", False, error), self.reporter.compiled)
        self.assertIn(("y", True, None), self.reporter.compiled)
        self.assertEqual(
            str(session.document),
            '<p>$\\foo$ and <math data-mathscan="TeX"><mi>y</mi></math></p>',
        )

    def test_remove_and_restore(self):
        html = "<p>Let $x$ be <b>and $$y$$</b></p>"
        session = self.session(html).render()
        session.remove_from_document(restore=True)
        self.assertEqual(str(session.document), html)
        self.assertEqual(session.state, DocumentState.REMOVED)
        for item in session.math:
            self.assertEqual(item.state, State.TYPESET)
        # a second removal does nothing
        session.remove_from_document(restore=True)
        self.assertEqual(str(session.document), html)

    def test_remove_without_restore(self):
        session = self.session("<p>Let $x$ be</p>").render()
        session.remove_from_document()
        self.assertEqual(str(session.document), "<p>Let  be</p>")
        self.assertFalse(session.math[0].resolved)

    def test_update_after_restore(self):
        session = self.session("<p>Let $x$ be</p>").render()
        rendered = str(session.document)
        session.remove_from_document(restore=True)
        session.update_document()
        self.assertEqual(str(session.document), rendered)

    def test_rendered_math_is_not_found_again(self):
        session = self.session("<p>$x$</p>").render()
        session.reset()
        session.discover()
        self.assertEqual(len(session.math), 0)

    def test_mathml_source(self):
        html = '<p>see <math display="block"><mi>y</mi></math></p>'
        session = self.session(html, [TexInput(), MathMLInput()]).render()
        math = session.document.find("math")
        self.assertEqual(self.adaptor.get_attribute(math, "display"), "block")
        self.assertEqual(self.adaptor.get_attribute(math, "data-mathscan"), "MathML")
        self.assertEqual(str(math.previous_sibling), "see ")
        self.assertEqual("".join(map(str, math.contents)), "<mi>y</mi>")
        self.assertTrue(session.math[0].display)
        session.remove_from_document(restore=True)
        self.assertEqual(str(session.document), html)

    def test_found_count_is_reported(self):
        self.session("<p>$a$ $b$</p>").discover()
        self.assertEqual(self.reporter.logs, ["Found 2 math items"])


def test_session_defaults_to_logging_reporter(caplog):
    adaptor = SoupAdaptor()
    document = adaptor.parse("<p>$}$</p>")
    session = DocumentSession(document, adaptor, TexInput())
    with caplog.at_level("INFO", logger="mathscan"):
        session.render()
    assert "Found 1 math items" in caplog.text
    assert "Could not compile" in caplog.text
    assert str(document) == "<p>$}$</p>"
