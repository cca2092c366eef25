from mathscan.mml.nodes import TexClass, fenced, inferred_row, node
from mathscan.parser.errors import UnexpectedCloseContext
from mathscan.parser.stack import StackItemFactory

START_ERRORS = {
    "close": "Extra close brace or missing open brace",
    "right": "Missing \\left or extra \\right",
    "end": "Missing \\begin or extra \\end",
}


def check_start(frame, item):
    if item.is_kind("stop"):
        return frame.finish()
    return None


def check_open(frame, item):
    if item.is_kind("close"):
        return frame.finish()
    return None


def finalize_open(frame):
    return node("TeXAtom", [inferred_row(frame.nodes)], tex_class=TexClass.ORD)


def check_left(frame, item):
    if item.is_kind("right"):
        frame.set("close", item.get("delim"))
        return frame.finish()
    return None


def finalize_left(frame):
    return fenced(frame.get("delim"), inferred_row(frame.nodes), frame.get("close"))


def check_begin(frame, item):
    if item.is_kind("end"):
        if item.get("env") != frame.get("env"):
            raise UnexpectedCloseContext(
                frame.kind,
                f"\\end{{{item.get('env')}}}",
                f"\\begin{{{frame.get('env')}}} ended with \\end{{{item.get('env')}}}",
            )
        return frame.finish()
    return None


def finalize_begin(frame):
    return node("mrow", [inferred_row(frame.nodes)], {"data-environment": frame.get("env")})


def register_base_items(factory: StackItemFactory) -> StackItemFactory:
    factory.register("start", check=check_start, is_open=True, errors=START_ERRORS)
    factory.register("stop", is_close=True)
    factory.register("mml", is_final=True)
    factory.register(
        "open", check=check_open, finalize=finalize_open, is_open=True,
        errors={"right": "Extra \\right or missing close brace",
                "end": "Extra \\end or missing close brace"},
    )
    factory.register("close", is_close=True)
    factory.register(
        "left", check=check_left, finalize=finalize_left, is_open=True,
        errors={"close": "Extra close brace or missing \\right",
                "end": "Extra \\end or missing \\right"},
    )
    factory.register("right", is_close=True)
    factory.register(
        "begin", check=check_begin, finalize=finalize_begin, is_open=True,
        errors={"close": "Extra close brace or missing \\end",
                "right": "Missing \\left or extra \\right"},
    )
    factory.register("end", is_close=True)
    return factory
