from mathscan.dom.adaptor import DOMAdaptor
from mathscan.dom.strings import TYPESET_ATTRIBUTE
from mathscan.mml.nodes import MmlNode, attribute_text


def mml_to_dom(adaptor: DOMAdaptor, mml: MmlNode):
    """Build MathML elements for an MmlNode tree with the given adaptor."""
    kind = mml.kind
    attributes = {name: attribute_text(value) for name, value in mml.attributes.items()}
    if kind == "TeXAtom":
        kind = "mrow"
        attributes["data-texclass"] = mml.tex_class.name if mml.tex_class is not None else "ORD"
    if mml.is_token:
        children = [adaptor.create_text(mml.text)] if mml.text else []
    else:
        children = [mml_to_dom(adaptor, child) for child in mml.children]
    return adaptor.create_node(kind, attributes, children)


class MathMLRenderer:
    """Typesets a compiled MathItem as a MathML element marked as already processed."""

    def __init__(self, adaptor: DOMAdaptor):
        self.adaptor = adaptor

    def __call__(self, math):
        root = mml_to_dom(self.adaptor, math.root)
        self.adaptor.set_attribute(root, TYPESET_ATTRIBUTE, math.input_jax.name)
        return root
