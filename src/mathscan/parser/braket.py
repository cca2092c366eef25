"""
Bra-ket and set-builder notation.

\\braket{a | b}, \\set{x | x > 0} and friends open a 'braket' frame that is
closed by the matching brace. Bars inside the frame become the frame's
separators, up to barmax of them; any further bar, or a bar outside a
braket frame, is an ordinary non-stretchy bar.
"""
from mathscan.mml.nodes import TexClass, fenced, node, token
from mathscan.parser.errors import TexError
from mathscan.parser.handlers import CHARACTER, MACRO, HandlerMap, macro

DOUBLE_BAR = "∥"

FENCE = {"fence": True, "stretchy": False, "symmetric": True}


def check_braket(frame, item):
    if item.is_kind("close"):
        return frame.finish()
    if item.is_kind("mml"):
        frame.push(item.first)
        return None, False
    return None


def finalize_braket(frame):
    inner = frame.base_mml()
    open_delim = frame.get("open")
    close_delim = frame.get("close")
    if frame.get("stretchy"):
        return fenced(open_delim, inner, close_delim)
    open_node = token("mo", open_delim, FENCE, TexClass.OPEN)
    close_node = token("mo", close_delim, FENCE, TexClass.CLOSE)
    return node("mrow", [open_node, inner, close_node],
                {"open": open_delim, "close": close_delim}, TexClass.INNER)


def braket(parser, name, open_delim, close_delim, stretchy, barmax):
    next_token = parser.next_token()
    if next_token is None or next_token.type != "LBRACE":
        raise TexError("MissingArgFor", f"Missing argument for {name}")
    parser.i += 1
    parser.push(parser.item_factory.create(
        "braket", barmax=barmax, barcount=0, open=open_delim, close=close_delim, stretchy=stretchy,
    ))


def bar(parser, name):
    c = "|" if name == "|" else DOUBLE_BAR
    top = parser.stack.top()
    if not top.is_kind("braket") or top.get("barcount") >= top.get("barmax"):
        parser.push(token("mo", c, {"stretchy": False}, TexClass.ORD))
        return
    if c == "|" and parser.get_next() == "|":
        parser.i += 1
        c = DOUBLE_BAR
    if not top.get("stretchy"):
        parser.push(token("mo", c, {"stretchy": False, "braketbar": True}))
        return
    # the empty atoms let each side of the bar size its delimiters separately
    parser.push(node("TeXAtom", tex_class=TexClass.CLOSE))
    top.set("barcount", top.get("barcount") + 1)
    parser.push(token("mo", c, {"stretchy": True, "braketbar": True}))
    parser.push(node("TeXAtom", tex_class=TexClass.OPEN))


def braket_maps():
    infinity = float("inf")
    macros = HandlerMap("braket-macros", MACRO, {
        "bra": (macro, "{\\langle {#1} \\vert}", 1),
        "ket": (macro, "{\\vert {#1} \\rangle}", 1),
        "braket": (braket, "⟨", "⟩", False, infinity),
        "set": (braket, "{", "}", False, 1),
        "Bra": (macro, "\\left\\langle {#1} \\right\\vert", 1),
        "Ket": (macro, "\\left\\vert {#1} \\right\\rangle", 1),
        "Braket": (braket, "⟨", "⟩", True, infinity),
        "Set": (braket, "{", "}", True, 1),
        "ketbra": (macro, "{\\vert {#1} \\rangle\\langle {#2} \\vert}", 2),
        "Ketbra": (macro, "\\left\\vert {#1} \\right\\rangle\\left\\langle {#2} \\right\\vert", 2),
        "|": bar,
    })
    characters = HandlerMap("braket-characters", CHARACTER, {"|": bar})
    return [macros, characters]


def configure_braket(registry, factory):
    factory.register("braket", check=check_braket, finalize=finalize_braket, is_open=True,
                     errors={"right": "Missing \\left or extra \\right",
                             "end": "Extra \\end or missing close brace"})
    for handler_map in braket_maps():
        registry.add_map(handler_map)
