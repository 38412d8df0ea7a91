"""
Assembler - Screen Composition

Pure function that merges an ordered list of components into one HTML
document ready to be rendered in an iframe (Tailwind CDN included).

Every component is wrapped in a container addressable by its id, and the
document listens for a `highlight-component` message so the host page can
outline a component from outside the frame.
"""

from typing import Iterable

from ..state.models import Component

HIGHLIGHT_MESSAGE_TYPE = "highlight-component"

_COMPONENT_BLOCK = """
    <!-- [START] Component: {name} (Type: {type} | ID: {id}) -->
    <div data-component-id="{id}" style="transition: outline 0.15s ease, outline-offset 0.15s ease;">
    {html}
    </div>
    <!-- [END] Component: {name} -->"""

# Direct children are outlined too: fixed/sticky elements (navbars, footers)
# escape the wrapper box visually.
_HIGHLIGHT_SCRIPT = """<script>
    window.addEventListener('message', (e) => {
        if (!e.data || e.data.type !== '%s') return;
        const targetId = e.data.id;
        document.querySelectorAll('[data-component-id]').forEach(wrapper => {
            const isTarget = wrapper.dataset.componentId === targetId;
            const style = isTarget ? '2px solid #3b82f6' : '';
            const offset = isTarget ? '2px' : '';
            wrapper.style.outline = style;
            wrapper.style.outlineOffset = offset;
            Array.from(wrapper.children).forEach(child => {
                child.style.outline = style;
                child.style.outlineOffset = offset;
            });
        });
    });
    </script>""" % HIGHLIGHT_MESSAGE_TYPE

_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Generated Screen</title>
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="min-h-screen">
    {body}
    {script}
</body>
</html>"""


def sort_components(components: Iterable[Component]) -> list[Component]:
    """Stable sort by order; components sharing an order keep their input order."""
    return sorted(components, key=lambda c: c.order)


def assemble_screen(components: Iterable[Component]) -> str:
    """
    Builds the full HTML document for a list of components.

    Deterministic: the same list always yields the same string.
    """
    body = "\n".join(
        _COMPONENT_BLOCK.format(id=c.id, name=c.name, type=c.type, html=c.html)
        for c in sort_components(components)
    )
    return _DOCUMENT.format(body=body, script=_HIGHLIGHT_SCRIPT)
