"""View rendering: the entry point tying negotiation, lookup, context and layout together.

A render call moves through fixed stages: format validated, view negotiated,
required locals checked, template located, engine dispatched, body
produced, layout composed. A failure at any stage raises a typed
``ViewException`` (or ``EngineExecutionError`` wrapping an engine failure)
and no partial output is returned.
"""

import asyncio
import functools
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from markupsafe import Markup

from viewforge.config import ViewSettings, get_settings
from viewforge.context import Locals, build_context, build_layout_context, check_required
from viewforge.engines.registry import EngineRegistry
from viewforge.exceptions import MissingTemplateError, RenderDepthError, ViewException
from viewforge.locator import TemplateLocator
from viewforge.logging_config import LIBRARY_LOGGER, get_logger, log_with_context
from viewforge.models.render import RenderRequest
from viewforge.negotiation import negotiate
from viewforge.template import Template
from viewforge.views.base import DEFAULT_LAYOUT, Layout, View

logger = get_logger(__name__)


class RenderSession:
    """State for a single render call.

    Holds the negotiated view class, format and the current partial depth.
    A session is never shared between calls.
    """

    def __init__(self, renderer: "ViewRenderer", view_cls: type[View], format: str):
        self.renderer = renderer
        self.view_cls = view_cls
        self.format = format
        self.depth = 0
        self.roots: tuple[Path, ...] = renderer.locator.search_roots(view_cls)
        self.encoding = renderer.locator.encoding_for(view_cls)

    @property
    def settings(self) -> ViewSettings:
        return self.renderer.settings

    @property
    def locator(self) -> TemplateLocator:
        return self.renderer.locator

    def render_view(self, view: View) -> str:
        """Render a view's own template and wrap it in its layout."""
        template = self.locator.locate(type(view), view.format)
        context = build_context(view, self.make_render(view, template, view.locals))
        body = template.render(context)
        return self.compose(view, body, context)

    def make_render(self, view: View, caller: Template, caller_locals: Locals) -> Callable[..., str]:
        """Build the ``render(...)`` callable exposed to a template.

        ``render(partial="shared/form", **locals)`` renders ``shared/_form``
        looked up from the caller's directory upwards;
        ``render(template="articles/index", **locals)`` renders a full
        template from the search roots. Both see the calling template's
        locals with the given ones layered on top.
        """

        def render(partial: str | None = None, template: str | None = None, **locals: Any) -> str:
            if (partial is None) == (template is None):
                raise TypeError("render() takes exactly one of partial= or template=")

            if partial is not None:
                target = self.locator.locate_partial(partial, self.format, caller.path.parent, self.roots, self.encoding)
            else:
                target = self.locator.locate_template(template, self.format, self.roots, self.encoding)

            self.depth += 1
            try:
                if self.depth > self.settings.max_render_depth:
                    raise RenderDepthError(self.depth, target.logical_name)
                child_locals = caller_locals.merge(**locals)
                context = build_context(view, self.make_render(view, target, child_locals), locals=child_locals)
                return Markup(target.render(context))
            finally:
                self.depth -= 1

        return render

    def layout_for(self, view_cls: type[View]) -> str | type[Layout] | None:
        """Layout chosen by class lookup, falling back to ``ViewSettings.layout``."""
        layout = view_cls.layout
        if layout is DEFAULT_LAYOUT:
            layout = self.settings.layout
        return layout or None

    def compose(self, view: View, body: str, view_context: Mapping[str, Any]) -> str:
        """Wrap a rendered body in the view's layout.

        A layout without a template for the requested format leaves the body
        unwrapped, so a view can render json bare while its html is laid out.
        """
        layout = self.layout_for(type(view))
        if layout is None:
            return body

        if isinstance(layout, str):
            layout_obj = Layout(view, Markup(body))
            name = layout.strip("/")
        else:
            layout_obj = layout(view, Markup(body))
            name = layout.logical_name()

        layouts_dir = self.settings.layouts_dir
        logical_name = f"{layouts_dir}/{name}" if layouts_dir else name
        try:
            template = self.locator.locate_template(logical_name, view.format, self.roots, self.encoding)
        except MissingTemplateError:
            log_with_context(
                logger,
                "debug",
                "No layout template for format, rendering bare",
                layout=logical_name,
                render_format=view.format,
                event_type="layout_skipped",
            )
            return body

        return template.render(build_layout_context(layout_obj, view_context))


class ViewRenderer:
    """Renders view classes to strings.

    One renderer is built from frozen settings at startup and shared by all
    callers. Building it applies ``settings.log_level`` to the library
    logger; handlers are left to the application (see ``setup_logging``).
    Each ``render`` call gets its own RenderSession, so concurrent
    calls never share mutable state besides the resolution cache.

    Example:
        renderer = ViewRenderer(ViewSettings(template_roots=[Path("templates")]))
        html = renderer.render(Articles.Index, format="html", articles=articles)
    """

    def __init__(
        self,
        settings: ViewSettings | None = None,
        registry: EngineRegistry | None = None,
    ):
        self.settings = settings or get_settings()
        get_logger(LIBRARY_LOGGER).setLevel(self.settings.log_level)
        self.registry = registry or EngineRegistry.from_settings(self.settings)
        self.locator = TemplateLocator(self.settings, self.registry)

    def render(self, view_cls: type[View], params: Mapping[str, Any] | None = None, /, **locals: Any) -> str:
        """Render a view.

        Args:
            view_cls: View class to render
            params: Optional mapping holding ``format`` and locals
            **locals: Locals (and/or ``format``), overriding ``params``

        Returns:
            Rendered output

        Raises:
            MissingFormatError: If no format was requested
            MissingLocalError: If a required local is absent
            MissingTemplateError: If no template matches the view/partial and format
            EncodingConfigurationError: If the template encoding is unknown
            EngineExecutionError: If the template engine fails
        """
        started = time.perf_counter()
        render_format = None

        try:
            request = RenderRequest.build(params, **locals)
            render_format = request.format
            handler = negotiate(view_cls, render_format)
            check_required(handler, request.locals)
            session = RenderSession(self, handler, request.format)
            view = handler(request.format, Locals(request.locals), session)
            output = view.render()
        except ViewException as e:
            log_with_context(
                logger,
                "warning",
                "Render failed",
                view=view_cls.__qualname__,
                render_format=render_format,
                error=e.message,
                error_code=e.code.value,
                event_type="render_failed",
            )
            raise

        log_with_context(
            logger,
            "debug",
            "Render complete",
            view=handler.__qualname__,
            render_format=request.format,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
            event_type="render_complete",
        )
        return output

    async def render_async(self, view_cls: type[View], params: Mapping[str, Any] | None = None, /, **locals: Any) -> str:
        """Render a view in a worker thread so the event loop is not blocked."""
        return await asyncio.to_thread(functools.partial(self.render, view_cls, params, **locals))

    def clear_cache(self) -> None:
        """Drop cached template resolutions."""
        self.locator.clear()
