import unittest

from mathscan.mml.nodes import TexClass
from mathscan.parser.braket import DOUBLE_BAR
from mathscan.parser.errors import TexError, UnterminatedFrame
from mathscan.parser.tex_parser import parse_tex


def texts(mml):
    return [child.text if child.is_token else child.kind for child in mml.children]


class TestBraket(unittest.TestCase):
    def test_set_with_one_separator(self):
        root = parse_tex("\\Set{x | y | z}")
        self.assertEqual(root.kind, "mrow")
        self.assertEqual(root.tex_class, TexClass.INNER)
        self.assertEqual((root.get("open"), root.get("close")), ("{", "}"))
        self.assertEqual(
            texts(root), ["{", "x", "TeXAtom", "|", "TeXAtom", "y", "|", "z", "}"]
        )
        children = root.children
        self.assertEqual(children[2].tex_class, TexClass.CLOSE)
        self.assertEqual(children[3].attributes, {"stretchy": True, "braketbar": True})
        self.assertEqual(children[4].tex_class, TexClass.OPEN)
        # barmax is 1, so the second bar is an ordinary one
        self.assertEqual(children[6].attributes, {"stretchy": False})
        self.assertEqual(children[6].tex_class, TexClass.ORD)
        self.assertTrue(children[0].get("stretchy"))

    def test_unterminated_set(self):
        with self.assertRaises(UnterminatedFrame) as info:
            parse_tex("\\Set{x")
        self.assertEqual(info.exception.kind, "braket")
        self.assertEqual(info.exception.properties["open"], "{")
        self.assertEqual(info.exception.properties["barcount"], 0)
        self.assertEqual(info.exception.offset, 0)

    def test_unterminated_set_after_bar(self):
        with self.assertRaises(UnterminatedFrame) as info:
            parse_tex("\\Set{x | y")
        # the properties are the ones the frame was opened with
        self.assertEqual(info.exception.properties["barcount"], 0)

    def test_non_stretchy_set(self):
        root = parse_tex("\\set{x | y}")
        self.assertEqual(root.tex_class, TexClass.INNER)
        self.assertEqual(texts(root), ["{", "x", "|", "y", "}"])
        fence = {"fence": True, "stretchy": False, "symmetric": True}
        self.assertEqual(root.children[0].attributes, fence)
        self.assertEqual(root.children[0].tex_class, TexClass.OPEN)
        self.assertEqual(root.children[4].tex_class, TexClass.CLOSE)
        self.assertEqual(root.children[2].attributes, {"stretchy": False, "braketbar": True})

    def test_double_bar(self):
        root = parse_tex("\\braket{a || b}")
        self.assertEqual(texts(root), ["⟨", "a", DOUBLE_BAR, "b", "⟩"])

    def test_double_bar_macro(self):
        root = parse_tex("\\Set{x \\| y}")
        self.assertEqual(root.children[3].text, DOUBLE_BAR)
        self.assertTrue(root.children[3].get("braketbar"))

    def test_unbounded_separators(self):
        root = parse_tex("\\Braket{a | b | c}")
        bars = [child for child in root.children if child.get("braketbar")]
        self.assertEqual(len(bars), 2)
        self.assertTrue(all(bar.get("stretchy") for bar in bars))

    def test_bar_outside_braket(self):
        root = parse_tex("a | b")
        self.assertEqual(root.children[1].text, "|")
        self.assertEqual(root.children[1].attributes, {"stretchy": False})
        self.assertEqual(root.children[1].tex_class, TexClass.ORD)

    def test_nested_group_is_not_a_braket_frame(self):
        root = parse_tex("\\set{{x | y}}")
        group = root.children[1]
        self.assertEqual(group.kind, "TeXAtom")
        self.assertEqual(group.children[1].attributes, {"stretchy": False})

    def test_missing_brace(self):
        with self.assertRaises(TexError) as info:
            parse_tex("\\Set x")
        self.assertEqual(info.exception.id, "MissingArgFor")


class TestBraMacros(unittest.TestCase):
    def test_bra(self):
        root = parse_tex("\\bra{\\phi}")
        self.assertEqual(root.kind, "TeXAtom")
        self.assertEqual(texts(root), ["⟨", "TeXAtom", "|"])

    def test_ket(self):
        self.assertEqual(texts(parse_tex("\\ket{\\psi}")), ["|", "TeXAtom", "⟩"])

    def test_stretchy_ket(self):
        root = parse_tex("\\Ket{x}")
        self.assertEqual((root.get("open"), root.get("close")), ("|", "⟩"))

    def test_ketbra(self):
        root = parse_tex("\\ketbra{a}{b}")
        self.assertEqual(texts(root), ["|", "TeXAtom", "⟩", "⟨", "TeXAtom", "|"])

    def test_stretchy_ketbra(self):
        root = parse_tex("\\Ketbra{a}{b}")
        self.assertEqual([child.get("close") for child in root.children], ["⟩", "|"])


def test_braket_to_mathml():
    root = parse_tex("\\set{x}")
    assert root.to_mathml() == (
        '<mrow open="{" close="}">'
        '<mo fence="true" stretchy="false" symmetric="true">{</mo>'
        "<mi>x</mi>"
        '<mo fence="true" stretchy="false" symmetric="true">}</mo>'
        "</mrow>"
    )
