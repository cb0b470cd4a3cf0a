"""
    Renders a puzzle's current state, handing every slot, rope path, pin and
    crossing to a render context.
"""

from profiling import profile


class TangleRender(object):
    """
    Renders a tangle puzzle.
    """

    @profile("render")
    def render(controller, renderContext):
        renderContext.render_puzzle(controller)
        renderContext.finalize()
        return renderContext.get_output()
