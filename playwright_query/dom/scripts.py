"""Browser-side functions evaluated against single elements.

Each script is an element function ``(el, arg) => value``. ElementHandle.evaluate()
passes the element as the first argument directly; Page.evaluate() takes a
single argument, so page-level callers go through page_script().
"""

GET_ATTRIBUTE = "(el, name) => el.getAttribute(name)"

# src is read from the live property so relative URLs come back resolved
GET_ATTRIBUTE_RESOLVED_SRC = """(el, name) => {
    if (name === "src") {
        return el.src;
    }
    return el.getAttribute(name);
}"""

GET_ATTRIBUTES = """(el) => {
    const attrs = {};
    for (const attr of Array.from(el.attributes)) {
        attrs[attr.name] = attr.value;
    }
    return attrs;
}"""

GET_INNER_TEXT = "(el) => el.innerText"

GET_INNER_HTML = "(el) => el.innerHTML"

GET_PROPERTY = "(el, name) => el[name]"

SET_VALUE = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event("input", { bubbles: true }));
    el.dispatchEvent(new Event("change", { bubbles: true }));
}"""


def page_script(element_fn: str) -> str:
    """Adapt an element function for ``page.evaluate(script, [handle, arg])``."""
    return f"([el, arg]) => ({element_fn})(el, arg)"
